from __future__ import annotations

from typing import Optional


class WatchpickError(Exception):
    """Base exception for watchpick."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class DuplicateItemError(WatchpickError):
    """Raised when a title with the same external id is already saved."""

    def __init__(self, external_id: str, message: str = "Item already in watchlist") -> None:
        self.external_id = external_id
        super().__init__(message)


class StorageError(WatchpickError):
    """Persistence I/O failure."""


class StorageReadError(StorageError):
    pass


class StorageCorruptError(StorageReadError):
    """Stored data exists but does not match its schema."""

    def __init__(self, key: str, message: Optional[str] = None) -> None:
        self.key = key
        super().__init__(message or f"stored value for {key!r} is corrupt")


class StorageWriteError(StorageError):
    pass


class NetworkError(WatchpickError):
    """Search/detail request failure (transport, timeout, HTTP status)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(WatchpickError):
    """The catalog has no record for the requested id/title."""


class AuthError(WatchpickError):
    """Identity provider rejected the request (or no user is signed in)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)
