"""
Search settings and the provider registry.

Settings come from the environment (optionally a `.env` file, see
`title_search.utils.env.load_env`; `TITLE_SEARCH_ENV_FILE` pins which
file):

- `SEARCH_PROVIDER`: registry name of the default provider (`tmdb` or `omdb`).
- `TMDB_BEARER_TOKEN` (or `TMDB_API_KEY`): TMDb read access token.
- `OMDB_API_KEY`: OMDb API key.
- `SEARCH_TIMEOUT_SECONDS`: deadline for one whole search call.
- `SEARCH_MAX_PAGES`: page ceiling per search call (`0` disables it).
- `SEARCH_HTTP_MAX_ATTEMPTS`: transport attempts per page request.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable

import requests

from title_search.integrations.http import HttpTransport
from title_search.integrations.omdb.client import OmdbSearchClient
from title_search.integrations.tmdb.client import TmdbSearchClient
from title_search.search.models import Searcher
from title_search.utils.env import load_env

DEFAULT_PROVIDER = "tmdb"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_PAGES = 50


def resolve_tmdb_token(token: str | None = None) -> str | None:
    resolved = (token or os.getenv("TMDB_BEARER_TOKEN") or os.getenv("TMDB_API_KEY") or "").strip()
    return resolved or None


def resolve_omdb_api_key(api_key: str | None = None) -> str | None:
    resolved = (api_key or os.getenv("OMDB_API_KEY") or "").strip()
    return resolved or None


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def _env_int(name: str, default: int, *, minimum: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {raw!r}")
    return value


@dataclass(frozen=True)
class SearchSettings:
    provider: str = DEFAULT_PROVIDER
    tmdb_token: str | None = None
    omdb_api_key: str | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_pages: int | None = DEFAULT_MAX_PAGES
    http_max_attempts: int = 1

    @classmethod
    def from_env(cls, *, load_dotenv_file: bool = True) -> SearchSettings:
        if load_dotenv_file:
            load_env()
        max_pages = _env_int("SEARCH_MAX_PAGES", DEFAULT_MAX_PAGES, minimum=0)
        return cls(
            provider=(os.getenv("SEARCH_PROVIDER") or DEFAULT_PROVIDER).strip().lower(),
            tmdb_token=resolve_tmdb_token(),
            omdb_api_key=resolve_omdb_api_key(),
            timeout_seconds=_env_float("SEARCH_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
            max_pages=max_pages or None,
            http_max_attempts=_env_int("SEARCH_HTTP_MAX_ATTEMPTS", 1, minimum=1),
        )


def _build_tmdb(settings: SearchSettings, transport: HttpTransport) -> Searcher:
    if not settings.tmdb_token:
        raise RuntimeError("TMDB_BEARER_TOKEN is not set.")
    return TmdbSearchClient(settings.tmdb_token, transport=transport, max_pages=settings.max_pages)


def _build_omdb(settings: SearchSettings, transport: HttpTransport) -> Searcher:
    if not settings.omdb_api_key:
        raise RuntimeError("OMDB_API_KEY is not set.")
    return OmdbSearchClient(settings.omdb_api_key, transport=transport, max_pages=settings.max_pages)


@dataclass(frozen=True)
class ProviderEntry:
    name: str
    build: Callable[[SearchSettings, HttpTransport], Searcher]


PROVIDERS = {
    "tmdb": ProviderEntry(name="tmdb", build=_build_tmdb),
    "omdb": ProviderEntry(name="omdb", build=_build_omdb),
}


def get_provider(name: str) -> ProviderEntry:
    provider = PROVIDERS.get((name or "").strip().lower())
    if not provider:
        raise ValueError(f"Unknown search provider: {name}")
    return provider


def build_searcher(
    settings: SearchSettings,
    *,
    provider: str | None = None,
    session: requests.Session | None = None,
) -> Searcher:
    entry = get_provider(provider or settings.provider)
    transport = HttpTransport(
        session,
        timeout_seconds=settings.timeout_seconds,
        max_attempts=settings.http_max_attempts,
    )
    return entry.build(settings, transport)
