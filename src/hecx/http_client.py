from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from .errors import TransportError

logger = logging.getLogger(__name__)

BasicAuth = tuple[str, str]


class HttpClient:
    """Thin httpx wrapper that resolves endpoint paths against the server URL.

    Paths are joined the way a browser resolves a link, so ``/api`` always
    lands on the server root regardless of any path on ``base_url``. Any
    :class:`httpx.RequestError` (network failures, redirect loops, bodies that
    fail to decode) surfaces as :class:`TransportError`; the status code is
    left for the caller to judge. Timeouts are httpx defaults.
    """

    def __init__(
        self,
        base_url: str,
        *,
        default_headers: dict[str, str] | None = None,
    ) -> None:
        self.base_url = httpx.URL(base_url)
        self._client = httpx.Client(follow_redirects=True)
        self._default_headers = default_headers or {}

    def url_for(self, path: str) -> httpx.URL:
        return self.base_url.join(path)

    def request(
        self,
        method: str,
        path: str,
        *,
        auth: BasicAuth | None = None,
        headers: dict[str, str] | None = None,
        json: Any | None = None,
    ) -> httpx.Response:
        url = self.url_for(path)
        merged_headers = {**self._default_headers, **(headers or {})}
        request_kwargs: dict[str, Any] = {"headers": merged_headers}
        if auth is not None:
            request_kwargs["auth"] = httpx.BasicAuth(*auth)
        if json is not None:
            request_kwargs["json"] = json
        logger.debug("%s %s (auth=%s)", method, url, "basic" if auth else "none")
        try:
            resp = self._client.request(method, url, **request_kwargs)
        except httpx.RequestError as e:
            raise TransportError(f"Transport error: {e}") from e
        logger.debug("%s %s -> %s", method, url, resp.status_code)
        return resp

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", path, **kwargs)

    def close(self) -> None:
        """Close the underlying :class:`httpx.Client`."""

        self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
