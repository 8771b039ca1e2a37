from watchpick.domain.auth import AuthSession, AuthUser, UserProfile
from watchpick.domain.errors import (
    AuthError,
    DuplicateItemError,
    NetworkError,
    NotFoundError,
    StorageCorruptError,
    StorageError,
    StorageReadError,
    StorageWriteError,
    WatchpickError,
)
from watchpick.domain.search_result import MovieDetail, Rating, SearchPage, SearchResult
from watchpick.domain.watchlist_item import MediaType, WatchlistItem

__all__ = [
    "AuthError",
    "AuthSession",
    "AuthUser",
    "DuplicateItemError",
    "MediaType",
    "MovieDetail",
    "NetworkError",
    "NotFoundError",
    "Rating",
    "SearchPage",
    "SearchResult",
    "StorageCorruptError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "UserProfile",
    "WatchlistItem",
    "WatchpickError",
]
