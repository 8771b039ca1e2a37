from __future__ import annotations

from typing import Any, Optional, Protocol

from watchpick.domain import AuthSession, AuthUser


class IdentityProviderPort(Protocol):
    """Hosted identity service boundary. Failures raise `AuthError`."""

    async def sign_up(self, *, email: str, password: str) -> tuple[AuthUser, Optional[AuthSession]]:
        """Create an account; the session is None while email confirmation is pending."""
        ...

    async def sign_in(self, *, email: str, password: str) -> AuthSession:
        ...

    async def sign_out(self, *, access_token: str) -> None:
        ...

    async def get_user(self, *, access_token: str) -> AuthUser:
        ...

    async def update_profile(self, *, access_token: str, user_id: str, fields: dict[str, Any]) -> None:
        ...

    async def close(self) -> None:
        ...
