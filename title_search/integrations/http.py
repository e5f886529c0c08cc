from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Mapping

import requests

from title_search.search.context import SearchContext
from title_search.search.errors import SearchCancelledError, SearchProviderError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "title-search/0.1"


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    text: str
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def snippet(self, limit: int = 400) -> str:
        return (self.text or "")[:limit]


class HttpTransport:
    """
    Outbound GET requests under a `SearchContext`.

    Status codes are returned as-is; classifying them is the caller's job.
    Retries are off by default (`max_attempts=1`). When enabled, connection
    errors, HTTP 429 and 5xx responses are retried with exponential backoff,
    but never past the context deadline.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout_seconds: float = 20.0,
        max_attempts: int = 1,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._session = session or requests.Session()
        self._timeout_seconds = timeout_seconds
        self._max_attempts = max_attempts
        self._user_agent = user_agent

    def get(
        self,
        ctx: SearchContext,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        provider: str | None = None,
    ) -> HttpResponse:
        request_headers = {"user-agent": self._user_agent, **dict(headers or {})}

        for attempt in range(self._max_attempts):
            ctx.raise_if_done()
            logger.debug(f"GET {url} params={_redact(params)} attempt={attempt + 1}/{self._max_attempts}")

            try:
                resp = self._session.get(
                    url,
                    params=params,
                    headers=request_headers,
                    timeout=ctx.request_timeout(self._timeout_seconds),
                )
            except requests.Timeout as exc:
                if ctx.is_cancelled or ctx.expired:
                    raise SearchCancelledError(f"search deadline exceeded: {exc}", provider=provider) from exc
                if self._should_retry(ctx, attempt):
                    self._backoff(ctx, attempt)
                    continue
                raise SearchProviderError(f"request timed out: {exc}", provider=provider) from exc
            except requests.RequestException as exc:
                if self._should_retry(ctx, attempt):
                    self._backoff(ctx, attempt)
                    continue
                raise SearchProviderError(f"request failed: {exc}", provider=provider) from exc

            # The socket timeout bounds each read, not the whole body; the deadline still wins.
            ctx.raise_if_done()

            response = HttpResponse(
                status_code=resp.status_code,
                text=resp.text or "",
                url=str(getattr(resp, "url", None) or url),
            )

            retryable = resp.status_code == 429 or 500 <= resp.status_code < 600
            if retryable and self._should_retry(ctx, attempt):
                retry_after = (getattr(resp, "headers", {}).get("Retry-After") or "").strip()
                self._backoff(ctx, attempt, retry_after=float(retry_after) if retry_after.isdigit() else None)
                continue

            return response

        # Unreachable: the final attempt either returns or raises.
        raise SearchProviderError("request failed (no response)", provider=provider)

    def _should_retry(self, ctx: SearchContext, attempt: int) -> bool:
        return attempt < self._max_attempts - 1 and not ctx.is_cancelled and not ctx.expired

    def _backoff(self, ctx: SearchContext, attempt: int, *, retry_after: float | None = None) -> None:
        delay = 1.0 * (2**attempt)
        if retry_after is not None:
            delay = max(delay, retry_after)
        delay += random.uniform(0.0, delay * 0.25)

        remaining = ctx.remaining()
        if remaining is not None and delay >= remaining:
            raise SearchCancelledError("search deadline exceeded before retry could be sent")

        logger.debug(f"Retrying in {delay:.2f}s (attempt {attempt + 1} failed)")
        time.sleep(delay)


def _redact(params: Mapping[str, Any] | None) -> dict[str, Any]:
    redacted: dict[str, Any] = {}
    for key, value in (params or {}).items():
        redacted[key] = "***" if "key" in key.lower() else value
    return redacted
