"""
TMDb integration clients.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from title_search.integrations.tmdb.client import (
        TmdbSearchClient,
        TmdbSearchConfig,
        parse_tmdb_results,
    )

__all__ = [
    "TmdbSearchClient",
    "TmdbSearchConfig",
    "parse_tmdb_results",
]


def __getattr__(name: str):
    if name in __all__:
        from title_search.integrations.tmdb import client

        return getattr(client, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
