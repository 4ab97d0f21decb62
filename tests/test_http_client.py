from __future__ import annotations

from collections.abc import Iterable

import httpx
import pytest

from hecx.errors import TransportError
from hecx.http_client import HttpClient


class StubClient:
    def __init__(self, responses: Iterable[object]) -> None:
        self._responses = list(responses)
        self.calls: list[tuple[str, httpx.URL, dict[str, object]]] = []
        self.closed = False

    def request(self, method: str, url: httpx.URL, **kwargs: object) -> httpx.Response:
        response = self._responses[len(self.calls)]
        self.calls.append((method, url, kwargs))
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


def setup_client(
    monkeypatch: pytest.MonkeyPatch, responses: Iterable[object], base_url: str = "https://hecate.test"
) -> tuple[HttpClient, StubClient]:
    stub = StubClient(responses)
    monkeypatch.setattr("hecx.http_client.httpx.Client", lambda *_, **__: stub)
    client = HttpClient(base_url, default_headers={"Accept": "application/json"})
    return client, stub


def test_absolute_path_replaces_base_path(monkeypatch: pytest.MonkeyPatch) -> None:
    response = httpx.Response(200, json={})
    client, stub = setup_client(monkeypatch, [response], base_url="https://hecate.test/prefix/")

    assert client.get("/api/data/stats") is response
    method, url, kwargs = stub.calls[0]
    assert method == "GET"
    assert str(url) == "https://hecate.test/api/data/stats"
    assert kwargs["headers"] == {"Accept": "application/json"}
    assert "auth" not in kwargs


def test_basic_auth_is_attached(monkeypatch: pytest.MonkeyPatch) -> None:
    client, stub = setup_client(monkeypatch, [httpx.Response(200)])

    client.get("/api", auth=("alice", "secret"), headers={"X-Trace": "1"})

    _, _, kwargs = stub.calls[0]
    assert isinstance(kwargs["auth"], httpx.BasicAuth)
    assert kwargs["headers"] == {"Accept": "application/json", "X-Trace": "1"}


def test_non_success_status_is_returned(monkeypatch: pytest.MonkeyPatch) -> None:
    client, _ = setup_client(monkeypatch, [httpx.Response(500, json={"reason": "down"})])

    assert client.get("/api").status_code == 500


def test_transport_errors_are_wrapped_without_retry(monkeypatch: pytest.MonkeyPatch) -> None:
    failure = httpx.ConnectError("refused")
    client, stub = setup_client(monkeypatch, [failure, httpx.Response(200)])

    with pytest.raises(TransportError) as exc_info:
        client.get("/api")

    assert exc_info.value.__cause__ is failure
    assert len(stub.calls) == 1


def test_context_manager_closes_session(monkeypatch: pytest.MonkeyPatch) -> None:
    client, stub = setup_client(monkeypatch, [])
    with client:
        pass
    assert stub.closed


def test_session_uses_httpx_default_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, object] = {}

    def fake_client(**kwargs: object) -> StubClient:
        seen.update(kwargs)
        return StubClient([])

    monkeypatch.setattr("hecx.http_client.httpx.Client", fake_client)
    HttpClient("https://hecate.test")

    assert seen == {"follow_redirects": True}
