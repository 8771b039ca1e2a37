from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from watchpick.application.auth import AuthSessionHolder
from watchpick.domain import AuthError, UserProfile
from watchpick.server.api.rest.dependencies import get_auth_session_holder
from watchpick.server.api.rest.v1.schemas import (
    ProfileUpdateRequest,
    SignInRequest,
    SignUpRequest,
    session_view,
)

router = APIRouter(prefix="/api/v1/auth", tags=["auth-v1"])


def _auth_failure(e: AuthError, default_status: int) -> HTTPException:
    status = e.status_code if e.status_code and 400 <= e.status_code < 500 else default_status
    return HTTPException(status_code=status, detail=e.message)


@router.get("/session")
async def get_session(holder: AuthSessionHolder = Depends(get_auth_session_holder)) -> Dict[str, Any]:
    return session_view(holder.session)


@router.post("/signup")
async def sign_up(
    req: SignUpRequest,
    holder: AuthSessionHolder = Depends(get_auth_session_holder),
) -> Dict[str, Any]:
    profile = UserProfile(
        first_name=req.first_name,
        last_name=req.last_name,
        date_of_birth=req.date_of_birth,
        country=req.country,
    )
    try:
        session = await holder.sign_up(req.email, req.password, profile=profile)
    except AuthError as e:
        raise _auth_failure(e, 400)
    return {**session_view(session), "confirmation_required": session is None}


@router.post("/signin")
async def sign_in(
    req: SignInRequest,
    holder: AuthSessionHolder = Depends(get_auth_session_holder),
) -> Dict[str, Any]:
    try:
        session = await holder.sign_in(req.email, req.password)
    except AuthError as e:
        raise _auth_failure(e, 401)
    return session_view(session)


@router.post("/signout", status_code=204, response_class=Response)
async def sign_out(holder: AuthSessionHolder = Depends(get_auth_session_holder)) -> Response:
    await holder.sign_out()
    return Response(status_code=204)


@router.patch("/profile", status_code=204, response_class=Response)
async def update_profile(
    req: ProfileUpdateRequest,
    holder: AuthSessionHolder = Depends(get_auth_session_holder),
) -> Response:
    try:
        await holder.update_profile(req.fields)
    except AuthError as e:
        raise _auth_failure(e, 401)
    return Response(status_code=204)
