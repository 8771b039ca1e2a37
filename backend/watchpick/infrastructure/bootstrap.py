from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from watchpick.application.auth import AuthSessionHolder
from watchpick.application.ports import IdentityProviderPort, KeyValueStorePort, MovieSearchPort
from watchpick.application.preferences import Preferences
from watchpick.application.watchlist import WatchlistStore
from watchpick.infrastructure.config.settings import (
    HAS_LAUNCHED_STORAGE_KEY,
    USER_TOKEN_STORAGE_KEY,
    WATCHLIST_STORAGE_KEY,
)

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    """Everything a surface (HTTP API, CLI) needs, wired once per process."""

    storage: KeyValueStorePort
    watchlist: WatchlistStore
    preferences: Preferences
    search: MovieSearchPort
    identity: IdentityProviderPort
    auth: AuthSessionHolder

    async def close(self) -> None:
        """Best-effort shutdown for long-lived adapters (HTTP sessions)."""
        for adapter in (self.search, self.identity, self.storage):
            close = getattr(adapter, "close", None)
            if callable(close):
                try:
                    await close()
                except Exception:
                    logger.exception("failed to close %s", type(adapter).__name__)


def build_app_services(
    *,
    storage: Optional[KeyValueStorePort] = None,
    search: Optional[MovieSearchPort] = None,
    identity: Optional[IdentityProviderPort] = None,
) -> AppServices:
    """Wire infrastructure adapters into the application services.

    Adapters not passed in are built from infrastructure settings.
    """
    if storage is None:
        from watchpick.infrastructure.persistence import build_key_value_store

        storage = build_key_value_store()
    if search is None:
        from watchpick.infrastructure.providers import OmdbClient

        search = OmdbClient()
    if identity is None:
        from watchpick.infrastructure.auth import SupabaseIdentityProvider

        identity = SupabaseIdentityProvider()

    preferences = Preferences(
        storage=storage,
        has_launched_key=HAS_LAUNCHED_STORAGE_KEY,
        user_token_key=USER_TOKEN_STORAGE_KEY,
    )
    return AppServices(
        storage=storage,
        watchlist=WatchlistStore(storage=storage, key=WATCHLIST_STORAGE_KEY),
        preferences=preferences,
        search=search,
        identity=identity,
        auth=AuthSessionHolder(provider=identity, preferences=preferences),
    )
