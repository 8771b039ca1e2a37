from __future__ import annotations

from fastapi import APIRouter

import watchpick.server.api.rest.v1.auth as auth_v1
import watchpick.server.api.rest.v1.onboarding as onboarding_v1
import watchpick.server.api.rest.v1.search as search_v1
import watchpick.server.api.rest.v1.watchlist as watchlist_v1

api_router = APIRouter()
api_router.include_router(auth_v1.router)
api_router.include_router(onboarding_v1.router)
api_router.include_router(search_v1.router)
api_router.include_router(watchlist_v1.router)

__all__ = ["api_router"]
