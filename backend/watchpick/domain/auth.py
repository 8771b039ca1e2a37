from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AuthSession:
    """Session issued by the hosted identity service."""

    access_token: str
    user: AuthUser
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "bearer"


@dataclass(frozen=True)
class UserProfile:
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    # Free-form input; normalized to YYYY-MM-DD before it reaches the provider.
    date_of_birth: Optional[str] = None
    country: Optional[str] = None
