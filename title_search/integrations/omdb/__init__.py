"""
OMDb integration clients.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from title_search.integrations.omdb.client import (
        OmdbSearchClient,
        OmdbSearchConfig,
        parse_omdb_results,
    )

__all__ = [
    "OmdbSearchClient",
    "OmdbSearchConfig",
    "parse_omdb_results",
]


def __getattr__(name: str):
    if name in __all__:
        from title_search.integrations.omdb import client

        return getattr(client, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
