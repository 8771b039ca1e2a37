from __future__ import annotations

import logging
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from watchpick.application.ports import MovieSearchPort
from watchpick.application.watchlist import WatchlistStore
from watchpick.domain import NetworkError, NotFoundError
from watchpick.server.api.rest.dependencies import get_search_client, get_watchlist_store
from watchpick.server.api.rest.v1.schemas import detail_view, search_result_view

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["search-v1"])


@router.get("/search")
async def search_titles(
    query: str = Query(..., description="Title search text"),
    type: Optional[Literal["movie", "series", "episode"]] = Query(default=None, description="Media type filter"),
    year: Optional[str] = Query(default=None, description="Release year filter"),
    page: int = Query(1, ge=1, le=100),
    client: MovieSearchPort = Depends(get_search_client),
    store: WatchlistStore = Depends(get_watchlist_store),
) -> Dict[str, Any]:
    try:
        result = await client.search(query, media_type=type, year=year, page=page)
    except NetworkError as e:
        logger.error("search failed for %r: %s", query, e)
        raise HTTPException(status_code=502, detail="Failed to search movies")
    return {
        "results": [search_result_view(r, saved=store.is_saved(r.external_id)) for r in result.results],
        "total_results": result.total_results,
        "error": result.error,
    }


@router.get("/titles")
async def lookup_title(
    title: str = Query(..., description="Exact title"),
    year: Optional[str] = Query(default=None),
    client: MovieSearchPort = Depends(get_search_client),
) -> Dict[str, Any]:
    try:
        detail = await client.get_by_title(title, year=year)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except NetworkError as e:
        logger.error("title lookup failed for %r: %s", title, e)
        raise HTTPException(status_code=502, detail="Failed to load title")
    return {"title": detail_view(detail)}


@router.get("/titles/{external_id}")
async def get_title(
    external_id: str,
    client: MovieSearchPort = Depends(get_search_client),
) -> Dict[str, Any]:
    try:
        detail = await client.get_details(external_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except NetworkError as e:
        logger.error("detail lookup failed for %s: %s", external_id, e)
        raise HTTPException(status_code=502, detail="Failed to load title")
    return {"title": detail_view(detail)}
