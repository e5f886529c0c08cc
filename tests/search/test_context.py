from __future__ import annotations

import pytest

from title_search.search import context as context_mod
from title_search.search.context import SearchContext
from title_search.search.errors import SearchCancelledError, SearchProviderError


def test_background_context_never_expires() -> None:
    ctx = SearchContext.background()

    assert ctx.remaining() is None
    assert ctx.expired is False
    assert ctx.request_timeout(20.0) == 20.0
    ctx.raise_if_done()


def test_cancel_sets_flag_and_raises() -> None:
    ctx = SearchContext()
    ctx.cancel()

    assert ctx.is_cancelled is True
    with pytest.raises(SearchCancelledError, match="cancelled"):
        ctx.raise_if_done()


def test_cancellation_is_a_provider_error() -> None:
    ctx = SearchContext()
    ctx.cancel()

    with pytest.raises(SearchProviderError):
        ctx.raise_if_done()


def test_deadline_caps_request_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    now = [1000.0]
    monkeypatch.setattr(context_mod.time, "monotonic", lambda: now[0])

    ctx = SearchContext(timeout_seconds=5)
    assert ctx.remaining() == 5.0
    assert ctx.request_timeout(20.0) == 5.0
    assert ctx.request_timeout(2.0) == 2.0

    now[0] = 1004.0
    assert ctx.remaining() == 1.0
    ctx.raise_if_done()

    now[0] = 1005.0
    assert ctx.expired is True
    assert ctx.remaining() == 0.0
    with pytest.raises(SearchCancelledError, match="deadline exceeded"):
        ctx.raise_if_done()


def test_negative_timeout_is_rejected() -> None:
    with pytest.raises(ValueError):
        SearchContext(timeout_seconds=-1)
