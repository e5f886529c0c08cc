from __future__ import annotations

from typing import Any

import pytest
import requests

from title_search.integrations import http as http_mod
from title_search.integrations.http import HttpTransport
from title_search.search.context import SearchContext
from title_search.search.errors import SearchCancelledError, SearchProviderError


class _FakeResponse:
    def __init__(self, status_code: int, text: str = "{}", headers: dict[str, str] | None = None) -> None:
        self.status_code = status_code
        self.text = text
        self.headers = headers or {}
        self.url = "https://example.test/search"


class _ScriptedSession:
    """Returns (or raises) the scripted outcomes in order."""

    def __init__(self, outcomes: list[Any]) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[dict[str, Any]] = []

    def get(self, url: str, **kwargs) -> _FakeResponse:  # noqa: ANN003
        self.calls.append({"url": url, **kwargs})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    recorded: list[float] = []
    monkeypatch.setattr(http_mod.time, "sleep", lambda seconds: recorded.append(seconds))
    monkeypatch.setattr(http_mod.random, "uniform", lambda a, b: 0.0)
    return recorded


def test_get_returns_status_and_body_without_classifying() -> None:
    session = _ScriptedSession([_FakeResponse(404, '{"status_message": "missing"}')])

    resp = HttpTransport(session).get(SearchContext.background(), "https://example.test/search", params={"q": "x"})

    assert resp.status_code == 404
    assert resp.ok is False
    assert resp.text == '{"status_message": "missing"}'
    assert resp.url == "https://example.test/search"


def test_get_merges_headers_and_uses_default_timeout() -> None:
    session = _ScriptedSession([_FakeResponse(200)])

    HttpTransport(session, timeout_seconds=7.5).get(
        SearchContext.background(),
        "https://example.test/search",
        headers={"accept": "application/json"},
    )

    call = session.calls[0]
    assert call["headers"]["accept"] == "application/json"
    assert call["headers"]["user-agent"] == http_mod.DEFAULT_USER_AGENT
    assert call["timeout"] == 7.5


def test_no_retries_by_default(sleeps: list[float]) -> None:
    session = _ScriptedSession([_FakeResponse(503), _FakeResponse(200)])

    resp = HttpTransport(session).get(SearchContext.background(), "https://example.test/search")

    assert resp.status_code == 503
    assert len(session.calls) == 1
    assert sleeps == []


def test_retries_server_errors_with_backoff(sleeps: list[float]) -> None:
    session = _ScriptedSession([_FakeResponse(503), _FakeResponse(429), _FakeResponse(200, '{"ok": true}')])

    resp = HttpTransport(session, max_attempts=3).get(SearchContext.background(), "https://example.test/search")

    assert resp.status_code == 200
    assert len(session.calls) == 3
    assert sleeps == [1.0, 2.0]


def test_retry_after_header_extends_backoff(sleeps: list[float]) -> None:
    session = _ScriptedSession([_FakeResponse(429, headers={"Retry-After": "5"}), _FakeResponse(200)])

    HttpTransport(session, max_attempts=2).get(SearchContext.background(), "https://example.test/search")

    assert sleeps == [5.0]


def test_last_attempt_response_is_returned_when_retries_run_out(sleeps: list[float]) -> None:
    session = _ScriptedSession([_FakeResponse(500), _FakeResponse(502)])

    resp = HttpTransport(session, max_attempts=2).get(SearchContext.background(), "https://example.test/search")

    assert resp.status_code == 502
    assert len(sleeps) == 1


def test_connection_errors_are_retried_then_wrapped(sleeps: list[float]) -> None:
    session = _ScriptedSession([requests.ConnectionError("boom 1"), requests.ConnectionError("boom 2")])

    with pytest.raises(SearchProviderError, match="boom 2") as excinfo:
        HttpTransport(session, max_attempts=2).get(
            SearchContext.background(), "https://example.test/search", provider="tmdb"
        )

    assert excinfo.value.provider == "tmdb"
    assert not isinstance(excinfo.value, SearchCancelledError)
    assert len(session.calls) == 2


def test_timeout_without_expired_deadline_is_a_provider_error() -> None:
    session = _ScriptedSession([requests.ReadTimeout("read timed out")])

    with pytest.raises(SearchProviderError, match="timed out") as excinfo:
        HttpTransport(session).get(SearchContext(timeout_seconds=60), "https://example.test/search")

    assert not isinstance(excinfo.value, SearchCancelledError)


def test_backoff_never_sleeps_past_the_deadline(monkeypatch: pytest.MonkeyPatch, sleeps: list[float]) -> None:
    session = _ScriptedSession([_FakeResponse(503), _FakeResponse(200)])
    ctx = SearchContext(timeout_seconds=60)
    monkeypatch.setattr(ctx, "remaining", lambda: 0.5)

    with pytest.raises(SearchCancelledError):
        HttpTransport(session, max_attempts=2).get(ctx, "https://example.test/search")

    assert sleeps == []
    assert len(session.calls) == 1


def test_cancelled_context_sends_nothing() -> None:
    session = _ScriptedSession([_FakeResponse(200)])
    ctx = SearchContext()
    ctx.cancel()

    with pytest.raises(SearchCancelledError):
        HttpTransport(session).get(ctx, "https://example.test/search")

    assert session.calls == []


def test_max_attempts_must_be_positive() -> None:
    with pytest.raises(ValueError):
        HttpTransport(_ScriptedSession([]), max_attempts=0)


def test_redact_hides_api_keys() -> None:
    assert http_mod._redact({"apiKey": "secret", "s": "Matrix"}) == {"apiKey": "***", "s": "Matrix"}


def test_response_received_after_cancel_is_not_returned() -> None:
    ctx = SearchContext(timeout_seconds=30)

    class _CancellingSession(_ScriptedSession):
        def get(self, url: str, **kwargs) -> _FakeResponse:  # noqa: ANN003
            response = super().get(url, **kwargs)
            ctx.cancel()
            return response

    session = _CancellingSession([_FakeResponse(200, '{"ok": true}')])

    with pytest.raises(SearchCancelledError, match="cancelled"):
        HttpTransport(session).get(ctx, "https://example.test/search")

    assert len(session.calls) == 1
