from __future__ import annotations

import logging
import re
from dataclasses import asdict
from typing import Any, Optional

from watchpick.application.ports.identity_provider_port import IdentityProviderPort
from watchpick.application.preferences import Preferences
from watchpick.domain import AuthError, AuthSession, AuthUser, UserProfile

logger = logging.getLogger(__name__)

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DMY_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

_REJECTED_TOKEN_STATUSES = {401, 403}


def normalize_date_of_birth(value: Optional[str]) -> Optional[str]:
    """DD/MM/YYYY -> YYYY-MM-DD; ISO dates pass through; anything else -> None."""
    raw = (value or "").strip()
    if not raw:
        return None
    if _ISO_DATE_RE.match(raw):
        return raw
    m = _DMY_DATE_RE.match(raw)
    if m:
        day, month, year = m.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    return None


def profile_fields(profile: UserProfile) -> dict[str, Any]:
    fields = asdict(profile)
    fields["date_of_birth"] = normalize_date_of_birth(profile.date_of_birth)
    return fields


class AuthSessionHolder:
    """Owns the identity provider's session object.

    The access token is mirrored into `Preferences` so a later process can
    restore the session. Nothing else in the app reads the session directly.
    """

    def __init__(self, *, provider: IdentityProviderPort, preferences: Preferences) -> None:
        self._provider = provider
        self._preferences = preferences
        self.session: Optional[AuthSession] = None
        self.loading = True

    @property
    def user(self) -> Optional[AuthUser]:
        return self.session.user if self.session is not None else None

    async def _set_session(self, session: Optional[AuthSession]) -> None:
        self.session = session
        if session is not None and session.access_token:
            await self._preferences.set_user_token(session.access_token)
        else:
            await self._preferences.remove_user_token()

    async def restore(self) -> Optional[AuthSession]:
        """Rebuild the session from a stored token, if the provider still accepts it."""
        try:
            token = await self._preferences.get_user_token()
            if not token:
                await self._set_session(None)
                return None
            try:
                user = await self._provider.get_user(access_token=token)
            except AuthError as exc:
                if exc.status_code in _REJECTED_TOKEN_STATUSES:
                    logger.info("Stored session rejected by identity provider: %s", exc)
                    await self._set_session(None)
                else:
                    # Token kept for the next restore.
                    logger.warning("Could not verify stored session: %s", exc)
                    self.session = None
                return None
            await self._set_session(AuthSession(access_token=token, user=user))
            return self.session
        finally:
            self.loading = False

    async def sign_up(
        self,
        email: str,
        password: str,
        profile: Optional[UserProfile] = None,
    ) -> Optional[AuthSession]:
        user, session = await self._provider.sign_up(email=email, password=password)
        if session is not None:
            await self._set_session(session)

        if profile is not None and user.id:
            token = session.access_token if session is not None else ""
            try:
                await self._provider.update_profile(
                    access_token=token,
                    user_id=user.id,
                    fields=profile_fields(profile),
                )
            except AuthError as exc:
                logger.error("Profile update error: %s", exc)
        return session

    async def sign_in(self, email: str, password: str) -> AuthSession:
        session = await self._provider.sign_in(email=email, password=password)
        await self._set_session(session)
        return session

    async def sign_out(self) -> None:
        session = self.session
        if session is not None:
            try:
                await self._provider.sign_out(access_token=session.access_token)
            except AuthError as exc:
                logger.error("SignOut error: %s", exc)
        await self._set_session(None)

    async def update_profile(self, fields: dict[str, Any]) -> None:
        session = self.session
        if session is None or not session.user.id:
            raise AuthError("No user logged in", status_code=401)
        payload = dict(fields)
        if "date_of_birth" in payload:
            payload["date_of_birth"] = normalize_date_of_birth(payload["date_of_birth"])
        await self._provider.update_profile(
            access_token=session.access_token,
            user_id=session.user.id,
            fields=payload,
        )
