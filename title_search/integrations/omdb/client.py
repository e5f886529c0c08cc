from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from title_search.integrations.http import HttpResponse, HttpTransport
from title_search.search.aggregator import SearchAggregator
from title_search.search.context import SearchContext
from title_search.search.errors import ResultParsingError, SearchProviderError
from title_search.search.models import PageOutcome, ResultType, SearchResult

logger = logging.getLogger(__name__)

PROVIDER_NAME = "omdb"

# OMDb also knows "game"; anything not listed here is skipped.
_TYPES: dict[str, ResultType] = {
    "movie": ResultType.MOVIE,
    "series": ResultType.SERIES,
    "episode": ResultType.EPISODE,
}


@dataclass(frozen=True)
class OmdbSearchConfig:
    base_url: str = "https://www.omdbapi.com"
    api_key_parameter: str = "apiKey"
    search_parameter: str = "s"
    page_parameter: str = "page"
    # OMDb reports "no matches" as an error string rather than an empty list.
    not_found_message: str = "Movie not found!"

    @property
    def search_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/"


class OmdbSearchClient:
    """
    OMDb `?s=` search adapter.

    OMDb pages hold up to 10 hits and report the total hit count as a decimal
    string; pagination stops once the results gathered across all pages of
    this search reach `totalResults`.
    """

    name = PROVIDER_NAME

    def __init__(
        self,
        api_key: str,
        *,
        transport: HttpTransport | None = None,
        config: OmdbSearchConfig | None = None,
        max_pages: int | None = None,
    ) -> None:
        self._api_key = api_key
        self._transport = transport or HttpTransport()
        self._config = config or OmdbSearchConfig()
        self._aggregator = SearchAggregator(self, max_pages=max_pages)

    @property
    def config(self) -> OmdbSearchConfig:
        return self._config

    def search(self, ctx: SearchContext, query: str, max_results: int) -> list[SearchResult]:
        return self._aggregator.search(ctx, query, max_results)

    def fetch_page(
        self,
        ctx: SearchContext,
        query: str,
        remaining: int,
        page: int,
        accumulated: int = 0,
    ) -> PageOutcome:
        resp = self._transport.get(
            ctx,
            self._config.search_url,
            params={
                self._config.api_key_parameter: self._api_key,
                self._config.search_parameter: query,
                self._config.page_parameter: page,
            },
            provider=self.name,
        )

        payload = _decode_payload(resp)
        raw_items = payload.get("Search") or []
        logger.info(f'Found {len(raw_items)} results for query "{query}" on page {page}')

        error = payload.get("Error")
        error = error.strip() if isinstance(error, str) else ""
        if error == self._config.not_found_message:
            return PageOutcome()
        if error:
            raise SearchProviderError(
                error,
                provider=self.name,
                status_code=resp.status_code,
                body_snippet=resp.snippet(),
            )
        if not resp.ok:
            raise SearchProviderError(
                f"HTTP {resp.status_code}",
                provider=self.name,
                status_code=resp.status_code,
                body_snippet=resp.snippet(),
            )

        results = parse_omdb_results(raw_items, limit=remaining)
        total_results = _parse_total_results(payload.get("totalResults"), has_items=bool(raw_items))

        quota_left = remaining - len(results) > 0
        more_available = accumulated + len(results) < total_results
        return PageOutcome(results=tuple(results), has_more_pages=more_available and quota_left)


def _decode_payload(resp: HttpResponse) -> dict[str, Any]:
    try:
        payload = json.loads(resp.text)
    except ValueError as exc:
        raise ResultParsingError(
            f"OMDb returned non-JSON response: {exc}",
            status_code=resp.status_code,
            body_snippet=resp.snippet(),
        ) from exc

    if not isinstance(payload, dict):
        raise ResultParsingError("OMDb returned unexpected JSON shape (not an object).", status_code=resp.status_code)
    if "Search" in payload and not isinstance(payload["Search"], (list, type(None))):
        raise ResultParsingError("OMDb returned unexpected JSON shape (`Search` is not a list).")
    return payload


def _parse_total_results(value: Any, *, has_items: bool) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raw = value.strip() if isinstance(value, str) else ""
    if not raw and not has_items:
        return 0
    try:
        return int(raw)
    except ValueError as exc:
        raise ResultParsingError(f"failed to convert totalResults to int: {value!r}") from exc


def parse_omdb_results(items: list[Any], *, limit: int) -> list[SearchResult]:
    """
    Map raw `Search[]` entries to canonical results, in order.

    Entries with an unmapped `Type` are dropped and do not count toward `limit`.
    `Poster` is kept verbatim, including OMDb's "N/A" placeholder.
    """

    results: list[SearchResult] = []
    for item in items:
        if len(results) >= limit:
            break
        if not isinstance(item, Mapping):
            continue

        result_type = _TYPES.get(str(item.get("Type") or "").lower())
        if result_type is None:
            continue

        results.append(
            SearchResult(
                title=_str(item.get("Title")),
                year=_str(item.get("Year")),
                imdb_id=_str(item.get("imdbID")),
                poster_url=_str(item.get("Poster")),
                type=result_type,
            )
        )
    return results


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""
