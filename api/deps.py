"""
Dependency injection for search settings and provider clients.

Searchers are built once per (settings, provider) and share one pooled
`requests.Session`; `close_searchers()` releases them at shutdown.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Annotated, Callable

import requests
from fastapi import Depends, HTTPException

from title_search.config import SearchSettings, build_searcher
from title_search.search.models import Searcher

logger = logging.getLogger(__name__)

SearcherFactory = Callable[[str | None], Searcher]


@lru_cache
def get_settings() -> SearchSettings:
    return SearchSettings.from_env()


@lru_cache
def get_http_session() -> requests.Session:
    return requests.Session()


@lru_cache(maxsize=8)
def _cached_searcher(settings: SearchSettings, provider: str) -> Searcher:
    logger.info(f"Building {provider} searcher")
    return build_searcher(settings, provider=provider, session=get_http_session())


def close_searchers() -> None:
    _cached_searcher.cache_clear()
    if get_http_session.cache_info().currsize:
        get_http_session().close()
        get_http_session.cache_clear()


Settings = Annotated[SearchSettings, Depends(get_settings)]


def get_searcher_factory(settings: Settings) -> SearcherFactory:
    """
    Returns a callable that hands out the searcher for a provider name (or the
    configured default when `None`).
    """

    def _factory(provider: str | None) -> Searcher:
        name = (provider or settings.provider).strip().lower()
        try:
            return _cached_searcher(settings, name)
        except (ValueError, RuntimeError) as e:
            logger.warning(f"Cannot build searcher for provider={provider!r}: {e}")
            raise HTTPException(status_code=400, detail=str(e))

    return _factory


# Type aliases for dependency injection
SearcherBuilder = Annotated[SearcherFactory, Depends(get_searcher_factory)]
