"""
Title auto-complete endpoint.

Results come from whichever provider the request (or configuration) selects,
always in the same shape.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from api.deps import SearcherBuilder, Settings
from title_search.search.context import SearchContext
from title_search.search.errors import (
    InvalidMaxResultsError,
    ResultParsingError,
    SearchCancelledError,
    SearchProviderError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


# --- Pydantic models ---


class TitleResult(BaseModel):
    title: str
    year: str
    imdb_id: str
    poster_url: str
    type: str
    provider_id: str


class SearchResponse(BaseModel):
    query: str
    provider: str
    count: int
    results: list[TitleResult]


# --- Endpoints ---


@router.get("", response_model=SearchResponse)
def search_titles(
    settings: Settings,
    build: SearcherBuilder,
    q: str = Query(..., min_length=1, description="Title text to search for."),
    limit: int = Query(default=10, ge=1, le=100),
    provider: str | None = Query(default=None, description="Provider name; defaults to SEARCH_PROVIDER."),
) -> dict:
    """Search titles across the configured metadata provider."""
    query = q.strip()
    if not query:
        raise HTTPException(status_code=422, detail="Query must not be blank")

    searcher = build(provider)
    provider_name = getattr(searcher, "name", None) or provider or settings.provider
    ctx = SearchContext(timeout_seconds=settings.timeout_seconds)

    try:
        results = searcher.search(ctx, query, limit)
    except InvalidMaxResultsError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SearchCancelledError as e:
        logger.warning(f"Search for {query!r} on {provider_name} timed out: {e}")
        raise HTTPException(status_code=504, detail=f"Search timed out: {e}")
    except ResultParsingError as e:
        logger.error(f"Unreadable response from {provider_name} for {query!r}: {e}")
        raise HTTPException(status_code=502, detail=f"Unexpected response from {provider_name}")
    except SearchProviderError as e:
        logger.error(f"Provider {provider_name} failed for {query!r}: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return {
        "query": query,
        "provider": provider_name,
        "count": len(results),
        "results": [result.to_dict() for result in results],
    }
