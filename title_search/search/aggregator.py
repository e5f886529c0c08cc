"""
Pagination control loop shared by every provider.

`SearchAggregator` turns a single-page capability (`PageFetcher`) into a full
`Searcher`: it asks for page 1, 2, ... until the caller's quota is met or the
provider says there is nothing left. It never looks at provider payloads; the
"more pages" decision is entirely the fetcher's.
"""
from __future__ import annotations

import logging

from title_search.search.context import SearchContext
from title_search.search.errors import InvalidMaxResultsError
from title_search.search.models import PageFetcher, SearchResult

logger = logging.getLogger(__name__)


class SearchAggregator:
    def __init__(self, fetcher: PageFetcher, *, max_pages: int | None = None) -> None:
        if max_pages is not None and max_pages <= 0:
            raise ValueError("max_pages must be positive (or None for no limit)")
        self._fetcher = fetcher
        self._max_pages = max_pages

    @property
    def name(self) -> str:
        return self._fetcher.name

    def search(self, ctx: SearchContext, query: str, max_results: int) -> list[SearchResult]:
        if max_results <= 0:
            raise InvalidMaxResultsError(max_results)

        results: list[SearchResult] = []
        page = 1

        while len(results) < max_results:
            ctx.raise_if_done()

            remaining = max_results - len(results)
            outcome = self._fetcher.fetch_page(ctx, query, remaining, page, len(results))
            # A page that lands after cancellation or the deadline is discarded.
            ctx.raise_if_done()
            # `remaining` is a hard ceiling even for fetchers that over-return.
            results.extend(outcome.results[:remaining])

            if not outcome.has_more_pages:
                break

            if self._max_pages is not None and page >= self._max_pages:
                logger.warning(
                    f"{self.name}: stopping search for {query!r} at page limit {self._max_pages} "
                    f"with {len(results)}/{max_results} results"
                )
                break

            page += 1

        logger.debug(f"{self.name}: search for {query!r} returned {len(results)} results over {page} page(s)")
        return results
