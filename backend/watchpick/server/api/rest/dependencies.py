from __future__ import annotations

from functools import lru_cache

from watchpick.application.auth import AuthSessionHolder
from watchpick.application.ports import MovieSearchPort
from watchpick.application.preferences import Preferences
from watchpick.application.watchlist import WatchlistStore
from watchpick.infrastructure.bootstrap import AppServices, build_app_services


@lru_cache(maxsize=1)
def _build_services() -> AppServices:
    return build_app_services()


def get_services() -> AppServices:
    return _build_services()


async def get_watchlist_store() -> WatchlistStore:
    """Process-wide watchlist store, loaded from storage on first access."""
    store = _build_services().watchlist
    if not store.loaded:
        await store.load()
    return store


def get_search_client() -> MovieSearchPort:
    return _build_services().search


def get_preferences() -> Preferences:
    return _build_services().preferences


async def get_auth_session_holder() -> AuthSessionHolder:
    holder = _build_services().auth
    if holder.loading:
        await holder.restore()
    return holder


async def shutdown_dependencies() -> None:
    """Best-effort shutdown hooks for long-lived adapters."""
    if _build_services.cache_info().currsize:
        await _build_services().close()
