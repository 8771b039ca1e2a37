from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional

from watchpick.application.codecs import decode_watchlist, encode_watchlist
from watchpick.application.ports.key_value_store_port import KeyValueStorePort
from watchpick.application.watchlist.random_picker import RandomSource, pick_random
from watchpick.domain import (
    DuplicateItemError,
    MediaType,
    SearchResult,
    StorageCorruptError,
    StorageError,
    WatchlistItem,
)

logger = logging.getLogger(__name__)

DEFAULT_WATCHLIST_KEY = "watchlist"

Listener = Callable[[tuple[WatchlistItem, ...]], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WatchlistStore:
    """Single source of truth for the user's saved titles.

    The list is loaded once from storage and held in memory. Every mutation
    updates memory first and then rewrites the whole list (write-through).
    A failed write leaves memory ahead of storage until the next successful
    write, and is reported through the boolean result and `error`.

    Duplicate adds and storage failures are reported, not raised: mutating
    methods return False and set `error` / `last_exception`.
    """

    def __init__(
        self,
        *,
        storage: KeyValueStorePort,
        key: str = DEFAULT_WATCHLIST_KEY,
        clock: Callable[[], datetime] = _utcnow,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._clock = clock
        self._rng = rng
        self._items: list[WatchlistItem] = []
        self._listeners: list[Listener] = []
        self._write_lock = asyncio.Lock()
        self.loaded = False
        self.error: Optional[str] = None
        self.last_exception: Optional[Exception] = None

    @property
    def items(self) -> tuple[WatchlistItem, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    # ---- subscribe / notify ----

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        snapshot = self.items
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("watchlist listener failed")

    # ---- error state ----

    def _fail(self, message: str, exc: Exception) -> bool:
        self.error = message
        self.last_exception = exc
        return False

    def _ok(self) -> bool:
        self.error = None
        self.last_exception = None
        return True

    # ---- persistence ----

    async def load(self) -> bool:
        """Read the persisted list. Never raises; falls back to an empty list."""
        self._items = []
        try:
            raw = await self._storage.get(self._key)
            if raw is not None:
                self._items = self._dedupe(decode_watchlist(raw, key=self._key))
        except StorageCorruptError as exc:
            logger.warning("Discarding corrupt watchlist data: %s", exc)
            self._items = []
            return self._finish_load(self._fail("Failed to load watchlist", exc))
        except StorageError as exc:
            logger.error("Failed to load watchlist: %s", exc)
            self._items = []
            return self._finish_load(self._fail("Failed to load watchlist", exc))
        return self._finish_load(self._ok())

    async def refresh(self) -> bool:
        return await self.load()

    def _finish_load(self, ok: bool) -> bool:
        self.loaded = True
        self._notify()
        return ok

    @staticmethod
    def _dedupe(items: list[WatchlistItem]) -> list[WatchlistItem]:
        seen: set[str] = set()
        out: list[WatchlistItem] = []
        for item in items:
            if item.external_id in seen:
                logger.warning("Dropping duplicate stored entry for %s", item.external_id)
                continue
            seen.add(item.external_id)
            out.append(item)
        return out

    async def _commit(self, items: list[WatchlistItem]) -> bool:
        self._items = items
        self._notify()
        # Serialized; each write carries the newest list.
        try:
            async with self._write_lock:
                await self._storage.set(self._key, encode_watchlist(list(self._items)))
        except StorageError as exc:
            logger.error("Failed to save watchlist: %s", exc)
            return self._fail("Failed to save watchlist", exc)
        return self._ok()

    # ---- operations ----

    def is_saved(self, external_id: str) -> bool:
        return any(item.external_id == external_id for item in self._items)

    def get(self, external_id: str) -> Optional[WatchlistItem]:
        return next((item for item in self._items if item.external_id == external_id), None)

    async def add(self, result: SearchResult) -> bool:
        if self.is_saved(result.external_id):
            return self._fail("Item already in watchlist", DuplicateItemError(result.external_id))

        now = self._clock()
        item = WatchlistItem(
            id=f"{result.external_id}_{int(now.timestamp() * 1000)}",
            title=result.title,
            year=result.year,
            type=MediaType.from_catalog(result.type),
            poster=result.poster,
            external_id=result.external_id,
            added_at=now.isoformat(),
            watched=False,
        )
        logger.info("Adding %s (%s) to watchlist", item.title, item.external_id)
        return await self._commit([*self._items, item])

    async def remove(self, external_id: str) -> bool:
        remaining = [item for item in self._items if item.external_id != external_id]
        if len(remaining) == len(self._items):
            logger.debug("remove(%s): nothing matched", external_id)
        return await self._commit(remaining)

    async def set_watched(self, external_id: str, watched: bool = True) -> bool:
        updated = [
            replace(item, watched=bool(watched)) if item.external_id == external_id else item
            for item in self._items
        ]
        return await self._commit(updated)

    async def clear(self) -> bool:
        return await self._commit([])

    def pick_random(self, exclude_watched: bool = True) -> Optional[WatchlistItem]:
        return pick_random(self._items, exclude_watched=exclude_watched, rng=self._rng)


__all__ = ["DEFAULT_WATCHLIST_KEY", "WatchlistStore"]
