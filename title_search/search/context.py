"""Cooperative cancellation and deadlines for search calls."""
from __future__ import annotations

import threading
import time

from title_search.search.errors import SearchCancelledError


class SearchContext:
    """
    Cancellable deadline threaded through every outbound page fetch.

    Create one per search call, optionally with `timeout_seconds`, and call
    `cancel()` from any thread to stop it. The aggregator checks
    `raise_if_done()` before each page, and the transport caps every request's
    socket timeout at the time left (see `request_timeout`).
    """

    def __init__(self, timeout_seconds: float | None = None) -> None:
        if timeout_seconds is not None and timeout_seconds < 0:
            raise ValueError("timeout_seconds must be >= 0")
        self._deadline = None if timeout_seconds is None else time.monotonic() + float(timeout_seconds)
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> SearchContext:
        return cls()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> float | None:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def request_timeout(self, default: float) -> float:
        remaining = self.remaining()
        if remaining is None:
            return default
        return min(default, remaining)

    def raise_if_done(self) -> None:
        if self._cancelled.is_set():
            raise SearchCancelledError("search cancelled")
        if self.expired:
            raise SearchCancelledError("search deadline exceeded")
