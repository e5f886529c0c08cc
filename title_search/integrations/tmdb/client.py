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

PROVIDER_NAME = "tmdb"

# TMDb multi-search also returns people ("person"); those have no mapping and are skipped.
_MEDIA_TYPES: dict[str, ResultType] = {
    "movie": ResultType.MOVIE,
    "tv": ResultType.SERIES,
}


@dataclass(frozen=True)
class TmdbSearchConfig:
    base_url: str = "https://api.themoviedb.org"
    api_version: str = "3"
    search_endpoint: str = "search"
    search_type: str = "multi"
    search_parameter: str = "query"
    page_parameter: str = "page"

    @property
    def search_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.api_version}/{self.search_endpoint}/{self.search_type}"


class TmdbSearchClient:
    """
    TMDb `/3/search/multi` adapter.

    Authenticates with a v4 read access token sent as a bearer credential.
    Pagination stops when the current page reaches TMDb's `total_pages`.
    """

    name = PROVIDER_NAME

    def __init__(
        self,
        bearer_token: str,
        *,
        transport: HttpTransport | None = None,
        config: TmdbSearchConfig | None = None,
        max_pages: int | None = None,
    ) -> None:
        self._bearer_token = bearer_token
        self._transport = transport or HttpTransport()
        self._config = config or TmdbSearchConfig()
        self._aggregator = SearchAggregator(self, max_pages=max_pages)

    @property
    def config(self) -> TmdbSearchConfig:
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
                self._config.search_parameter: query,
                self._config.page_parameter: page,
            },
            headers={
                "Authorization": f"Bearer {self._bearer_token}",
                "accept": "application/json",
            },
            provider=self.name,
        )

        payload = _decode_payload(resp)

        status_message = payload.get("status_message")
        status_message = status_message if isinstance(status_message, str) else ""
        unsuccessful = payload.get("success") is not True and bool(status_message)
        if resp.status_code != 200 or unsuccessful:
            raise SearchProviderError(
                status_message or f"HTTP {resp.status_code}",
                provider=self.name,
                status_code=resp.status_code,
                body_snippet=resp.snippet(),
            )

        raw_items = payload.get("results") or []
        logger.info(f'Found {len(raw_items)} results for query "{query}" on page {page}')

        results = parse_tmdb_results(raw_items, limit=remaining)

        total_pages = payload.get("total_pages")
        total_pages = total_pages if isinstance(total_pages, int) else 0
        quota_left = remaining - len(results) > 0
        return PageOutcome(results=tuple(results), has_more_pages=page < total_pages and quota_left)


def _decode_payload(resp: HttpResponse) -> dict[str, Any]:
    try:
        payload = json.loads(resp.text)
    except ValueError as exc:
        raise ResultParsingError(
            f"TMDb returned non-JSON response: {exc}",
            status_code=resp.status_code,
            body_snippet=resp.snippet(),
        ) from exc

    if not isinstance(payload, dict):
        raise ResultParsingError("TMDb returned unexpected JSON shape (not an object).", status_code=resp.status_code)
    if "results" in payload and not isinstance(payload["results"], (list, type(None))):
        raise ResultParsingError("TMDb returned unexpected JSON shape (`results` is not a list).")
    return payload


def parse_tmdb_results(items: list[Any], *, limit: int) -> list[SearchResult]:
    """
    Map raw `results[]` entries to canonical results, in order.

    Entries with an unmapped `media_type` are dropped and do not count toward `limit`.
    """

    results: list[SearchResult] = []
    for item in items:
        if len(results) >= limit:
            break
        if not isinstance(item, Mapping):
            continue

        result_type = _MEDIA_TYPES.get(str(item.get("media_type") or ""))
        if result_type is None:
            continue

        tmdb_id = item.get("id")
        results.append(
            SearchResult(
                title=_str(item.get("title")) or _str(item.get("name")),
                year=_str(item.get("first_air_date")) or _str(item.get("release_date")),
                imdb_id=_str(item.get("imdb_id")),
                poster_url=_str(item.get("poster_path")),
                type=result_type,
                provider_id=str(tmdb_id) if tmdb_id is not None else "",
            )
        )
    return results


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""
