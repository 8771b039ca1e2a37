from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from watchpick.application.watchlist import WatchlistStore, plan_spin
from watchpick.config.settings import PICK_EXCLUDE_WATCHED
from watchpick.domain import DuplicateItemError
from watchpick.server.api.rest.dependencies import get_watchlist_store
from watchpick.server.api.rest.v1.schemas import (
    WatchedUpdateRequest,
    WatchlistAddRequest,
    item_view,
    spin_view,
)

router = APIRouter(prefix="/api/v1", tags=["watchlist-v1"])


def _store_failure(store: WatchlistStore) -> HTTPException:
    if isinstance(store.last_exception, DuplicateItemError):
        return HTTPException(status_code=409, detail=store.error or "Item already in watchlist")
    return HTTPException(status_code=500, detail=store.error or "watchlist storage failure")


@router.get("/watchlist")
async def list_watchlist(
    watched: Optional[bool] = Query(default=None, description="Filter by watched flag (optional)"),
    store: WatchlistStore = Depends(get_watchlist_store),
) -> Dict[str, Any]:
    items = store.items
    if watched is not None:
        items = tuple(i for i in items if i.watched == watched)
    return {"items": [item_view(i) for i in items], "error": store.error}


@router.post("/watchlist", status_code=201)
async def add_watchlist_item(
    req: WatchlistAddRequest,
    store: WatchlistStore = Depends(get_watchlist_store),
) -> Dict[str, Any]:
    result = req.to_search_result()
    if not await store.add(result):
        raise _store_failure(store)
    item = store.get(result.external_id)
    return {"item": item_view(item) if item is not None else None}


@router.delete("/watchlist", status_code=204, response_class=Response)
async def clear_watchlist(store: WatchlistStore = Depends(get_watchlist_store)) -> Response:
    if not await store.clear():
        raise _store_failure(store)
    return Response(status_code=204)


@router.get("/watchlist/random")
async def pick_random_item(
    exclude_watched: bool = Query(default=PICK_EXCLUDE_WATCHED, description="Only consider unwatched titles"),
    store: WatchlistStore = Depends(get_watchlist_store),
) -> Dict[str, Any]:
    item = store.pick_random(exclude_watched=exclude_watched)
    return {"item": item_view(item) if item is not None else None}


@router.get("/watchlist/spin")
async def spin_watchlist(store: WatchlistStore = Depends(get_watchlist_store)) -> Dict[str, Any]:
    plan = plan_spin(store.items)
    return {"plan": spin_view(plan) if plan is not None else None}


@router.get("/watchlist/{external_id}")
async def get_watchlist_item(
    external_id: str,
    store: WatchlistStore = Depends(get_watchlist_store),
) -> Dict[str, Any]:
    item = store.get(external_id)
    if item is None:
        raise HTTPException(status_code=404, detail="watchlist item not found")
    return {"item": item_view(item)}


@router.patch("/watchlist/{external_id}")
async def set_watched(
    external_id: str,
    req: WatchedUpdateRequest,
    store: WatchlistStore = Depends(get_watchlist_store),
) -> Dict[str, Any]:
    if not await store.set_watched(external_id, req.watched):
        raise _store_failure(store)
    item = store.get(external_id)
    return {"item": item_view(item) if item is not None else None}


@router.delete("/watchlist/{external_id}", status_code=204, response_class=Response)
async def remove_watchlist_item(
    external_id: str,
    store: WatchlistStore = Depends(get_watchlist_store),
) -> Response:
    if not await store.remove(external_id):
        raise _store_failure(store)
    return Response(status_code=204)
