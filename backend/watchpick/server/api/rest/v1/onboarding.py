from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from watchpick.application.preferences import Preferences
from watchpick.server.api.rest.dependencies import get_preferences

router = APIRouter(prefix="/api/v1", tags=["onboarding-v1"])


@router.get("/onboarding")
async def get_onboarding(prefs: Preferences = Depends(get_preferences)) -> Dict[str, Any]:
    return {"has_launched": await prefs.get_has_launched()}


@router.post("/onboarding")
async def complete_onboarding(prefs: Preferences = Depends(get_preferences)) -> Dict[str, Any]:
    if not await prefs.set_has_launched():
        raise HTTPException(status_code=500, detail="Failed to save onboarding state")
    return {"has_launched": True}


@router.delete("/onboarding", status_code=204, response_class=Response)
async def reset_onboarding(prefs: Preferences = Depends(get_preferences)) -> Response:
    if not await prefs.reset_onboarding():
        raise HTTPException(status_code=500, detail="Failed to reset onboarding state")
    return Response(status_code=204)
