"""
Provider-agnostic title search engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from title_search.search.aggregator import SearchAggregator
    from title_search.search.context import SearchContext
    from title_search.search.errors import (
        InvalidMaxResultsError,
        ResultParsingError,
        SearchCancelledError,
        SearchError,
        SearchProviderError,
    )
    from title_search.search.models import PageFetcher, PageOutcome, ResultType, Searcher, SearchResult

_EXPORTS = {
    "SearchAggregator": "aggregator",
    "SearchContext": "context",
    "InvalidMaxResultsError": "errors",
    "ResultParsingError": "errors",
    "SearchCancelledError": "errors",
    "SearchError": "errors",
    "SearchProviderError": "errors",
    "PageFetcher": "models",
    "PageOutcome": "models",
    "ResultType": "models",
    "Searcher": "models",
    "SearchResult": "models",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str):
    module_name = _EXPORTS.get(name)
    if module_name is not None:
        from importlib import import_module

        module = import_module(f"title_search.search.{module_name}")
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
