from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from watchpick.application.ports.identity_provider_port import IdentityProviderPort
from watchpick.domain import AuthError, AuthSession, AuthUser
from watchpick.infrastructure.config.settings import (
    SUPABASE_ANON_KEY,
    SUPABASE_PROFILES_TABLE,
    SUPABASE_TIMEOUT_S,
    SUPABASE_URL,
)

logger = logging.getLogger(__name__)


def _parse_user(raw: Any) -> AuthUser:
    if not isinstance(raw, dict) or not raw.get("id"):
        raise AuthError("identity provider returned no user")
    metadata = raw.get("user_metadata") or {}
    if not isinstance(metadata, dict):
        metadata = {}
    return AuthUser(id=str(raw["id"]), email=raw.get("email"), metadata=metadata)


def _parse_session(raw: Any) -> Optional[AuthSession]:
    if not isinstance(raw, dict) or not raw.get("access_token"):
        return None
    expires_in = raw.get("expires_in")
    return AuthSession(
        access_token=str(raw["access_token"]),
        refresh_token=raw.get("refresh_token"),
        expires_in=int(expires_in) if expires_in is not None else None,
        token_type=str(raw.get("token_type") or "bearer"),
        user=_parse_user(raw.get("user")),
    )


def _error_message(payload: Any, fallback: str) -> str:
    if isinstance(payload, dict):
        for key in ("error_description", "msg", "message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return fallback


class SupabaseIdentityProvider(IdentityProviderPort):
    """Supabase auth (GoTrue) + profiles table (PostgREST) over HTTP.

    Every failure is surfaced as `AuthError`, carrying the upstream status
    code when there is one.
    """

    def __init__(
        self,
        *,
        base_url: str = SUPABASE_URL,
        anon_key: str = SUPABASE_ANON_KEY,
        timeout_s: float = SUPABASE_TIMEOUT_S,
        profiles_table: str = SUPABASE_PROFILES_TABLE,
    ) -> None:
        self._base_url = (base_url or "").rstrip("/")
        self._anon_key = (anon_key or "").strip()
        self._timeout_s = float(timeout_s or 10.0)
        self._profiles_table = profiles_table or "profiles"
        self._session: aiohttp.ClientSession | None = None
        self._lock = asyncio.Lock()

    def _headers(self, *, access_token: Optional[str] = None) -> dict[str, str]:
        headers = {"content-type": "application/json", "apikey": self._anon_key}
        headers["authorization"] = f"Bearer {access_token or self._anon_key}"
        return headers

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None and not self._session.closed:
            return self._session

        async with self._lock:
            if self._session is not None and not self._session.closed:
                return self._session

            timeout = aiohttp.ClientTimeout(total=self._timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout)
            return self._session

    async def _call(
        self,
        method: str,
        path: str,
        *,
        access_token: Optional[str] = None,
        params: Optional[dict[str, str]] = None,
        json: Optional[dict[str, Any]] = None,
        extra_headers: Optional[dict[str, str]] = None,
    ) -> Any:
        if not self._base_url or not self._anon_key:
            raise AuthError("identity provider not configured (set SUPABASE_URL and SUPABASE_ANON_KEY)")

        headers = self._headers(access_token=access_token)
        if extra_headers:
            headers.update(extra_headers)
        try:
            session = await self._get_session()
            async with session.request(
                method, f"{self._base_url}{path}", params=params, json=json, headers=headers
            ) as resp:
                text = await resp.text()
                data: Any = None
                if text:
                    try:
                        data = await resp.json(content_type=None)
                    except ValueError:
                        data = None
                if resp.status >= 400:
                    message = _error_message(data, f"identity request failed ({resp.status})")
                    logger.warning("Supabase %s %s failed (%s): %s", method, path, resp.status, message)
                    raise AuthError(message, status_code=resp.status)
                return data
        except AuthError:
            raise
        except asyncio.TimeoutError as exc:
            raise AuthError(f"identity request timed out after {self._timeout_s}s") from exc
        except aiohttp.ClientError as exc:
            raise AuthError(f"identity request failed: {exc}") from exc

    async def sign_up(self, *, email: str, password: str) -> tuple[AuthUser, Optional[AuthSession]]:
        data = await self._call("POST", "/auth/v1/signup", json={"email": email, "password": password})
        session = _parse_session(data)
        if session is not None:
            return session.user, session
        # Email confirmation pending: GoTrue returns the bare user (or {"user": ...}).
        raw_user = data.get("user") if isinstance(data, dict) and "user" in data else data
        return _parse_user(raw_user), None

    async def sign_in(self, *, email: str, password: str) -> AuthSession:
        data = await self._call(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        session = _parse_session(data)
        if session is None:
            raise AuthError("identity provider returned no session")
        return session

    async def sign_out(self, *, access_token: str) -> None:
        await self._call("POST", "/auth/v1/logout", access_token=access_token)

    async def get_user(self, *, access_token: str) -> AuthUser:
        return _parse_user(await self._call("GET", "/auth/v1/user", access_token=access_token))

    async def update_profile(self, *, access_token: str, user_id: str, fields: dict[str, Any]) -> None:
        await self._call(
            "PATCH",
            f"/rest/v1/{self._profiles_table}",
            access_token=access_token or None,
            params={"id": f"eq.{user_id}"},
            json=dict(fields),
            extra_headers={"prefer": "return=minimal"},
        )

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
