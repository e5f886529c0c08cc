from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from title_search.search.context import SearchContext


class ResultType(str, Enum):
    """Closed set of title kinds a search can return."""

    MOVIE = "movie"
    SERIES = "series"
    EPISODE = "episode"


@dataclass(frozen=True)
class SearchResult:
    """
    Canonical, provider-independent search hit.

    `year` is kept in the provider's own format (e.g. "2019", "2008-2013" or
    "2021-03-14"); empty strings stand in for values a provider does not expose.
    """

    title: str
    type: ResultType
    year: str = ""
    imdb_id: str = ""
    poster_url: str = ""
    provider_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "year": self.year,
            "imdb_id": self.imdb_id,
            "poster_url": self.poster_url,
            "type": self.type.value,
            "provider_id": self.provider_id,
        }


@dataclass(frozen=True)
class PageOutcome:
    """Canonical results from one provider round trip."""

    results: tuple[SearchResult, ...] = ()
    has_more_pages: bool = False


class Searcher(Protocol):
    """
    Port used by the rest of the system to search titles.

    Implementations return at most `max_results` results, in provider order,
    and raise `SearchError` subclasses on failure.
    """

    def search(self, ctx: SearchContext, query: str, max_results: int) -> list[SearchResult]: ...


class PageFetcher(Protocol):
    """
    Single-page fetch capability the aggregator is written against.

    `remaining` is a hard ceiling on how many canonical results the page may
    contribute. `accumulated` is how many results the current search already
    holds from earlier pages.
    """

    name: str

    def fetch_page(
        self,
        ctx: SearchContext,
        query: str,
        remaining: int,
        page: int,
        accumulated: int,
    ) -> PageOutcome: ...
