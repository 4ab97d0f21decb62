from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TextIO

import httpx
import typer

from ..context import ConnectionContext, Credentials, required_credential_fields
from ..errors import HecxError, UnexpectedStatusError
from ..http_client import HttpClient
from ..models.invocation import InvocationMode, InvocationOptions, select_mode
from ..prompt import Prompter, TerminalPrompter, prompt_session

logger = logging.getLogger(__name__)

ResultCallback = Callable[[HecxError | None, Any], None]
Options = InvocationOptions | Mapping[str, Any] | None


@dataclass(frozen=True)
class Endpoint:
    """A server operation: its path and the auth rule guarding it.

    ``skip_when_authenticated`` lets existing credentials suppress the
    prompt. The metadata endpoint consults its rule even when credentials
    are already set, so it leaves this off.
    """

    name: str
    path: str
    rule_key: str
    skip_when_authenticated: bool = True


SERVER_META = Endpoint("server", "/api", "server", skip_when_authenticated=False)
SERVER_STATS = Endpoint("stats", "/api/data/stats", "stats.get")


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one call: either ``error`` or ``value`` is meaningful."""

    value: Any = None
    error: HecxError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _decode_body(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


class ServerClient:
    """Access the server metadata and statistics endpoints.

    Each call selects a mode from its options. Programmatic calls hand
    ``(error, result)`` to a callback; scripted and interactive calls print
    the result as JSON on stdout and raise any error. Only interactive calls
    prompt for credentials, and only when the endpoint's auth rule requires
    them.
    """

    def __init__(
        self,
        context: ConnectionContext,
        *,
        prompter: Prompter | None = None,
        http: HttpClient | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.context = context
        self.http = http or HttpClient(context.url, default_headers={"Accept": "application/json"})
        self.prompter: Prompter = prompter or TerminalPrompter()
        self._stdout = stdout

    def close(self) -> None:
        """Close the underlying HTTP session."""

        self.http.close()

    def __enter__(self) -> ServerClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: Any,
    ) -> None:
        self.close()

    def get(self, options: Options = None, callback: ResultCallback | None = None) -> None:
        """Fetch server metadata from ``/api``."""

        self.fetch(SERVER_META, options, callback)

    def stats(self, options: Options = None, callback: ResultCallback | None = None) -> None:
        """Fetch geometry statistics from ``/api/data/stats``."""

        self.fetch(SERVER_STATS, options, callback)

    def fetch(
        self,
        endpoint: Endpoint,
        options: Options = None,
        callback: ResultCallback | None = None,
    ) -> None:
        mode = select_mode(options)
        if mode is InvocationMode.PROGRAMMATIC and callback is None:
            raise ValueError("A callback is required for programmatic calls")
        self.deliver(mode, self.fetch_result(endpoint, mode), callback)

    def fetch_result(self, endpoint: Endpoint, mode: InvocationMode) -> FetchResult:
        """Resolve credentials if ``mode`` allows it, then issue one request."""

        if mode is InvocationMode.INTERACTIVE:
            try:
                self._resolve_credentials(endpoint)
            except HecxError as exc:
                return FetchResult(error=exc)
        try:
            return FetchResult(value=self._dispatch(endpoint))
        except HecxError as exc:
            return FetchResult(error=exc)

    def _resolve_credentials(self, endpoint: Endpoint) -> None:
        fields = required_credential_fields(
            self.context.auth_rules,
            endpoint.rule_key,
            self.context.credentials,
            skip_when_authenticated=endpoint.skip_when_authenticated,
        )
        if not fields:
            logger.debug("No credentials needed for %s", endpoint.name)
            return
        logger.debug("Prompting for %s before %s", ", ".join(fields), endpoint.name)
        with prompt_session(self.prompter) as session:
            values = session.request_fields(fields)
        username = values.get("username")
        if username:
            self.context.credentials = Credentials(username, values.get("password", ""))

    def _dispatch(self, endpoint: Endpoint) -> Any:
        creds = self.context.credentials
        resp = self.http.get(endpoint.path, auth=creds.as_basic_auth() if creds else None)
        body = _decode_body(resp)
        if resp.status_code != 200:
            raise UnexpectedStatusError(resp.status_code, body)
        return body

    def deliver(
        self,
        mode: InvocationMode,
        result: FetchResult,
        callback: ResultCallback | None = None,
    ) -> None:
        """Route ``result`` to ``callback`` or to stdout depending on ``mode``."""

        if mode is InvocationMode.PROGRAMMATIC:
            if callback is None:
                raise ValueError("A callback is required for programmatic calls")
            if result.error is not None:
                callback(result.error, None)
            else:
                callback(None, result.value)
            return
        if result.error is not None:
            raise result.error
        text = json.dumps(result.value, indent=4, ensure_ascii=False)
        if self._stdout is not None:
            self._stdout.write(text + "\n")
        else:
            typer.echo(text)
