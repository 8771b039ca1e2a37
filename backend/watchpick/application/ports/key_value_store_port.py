from __future__ import annotations

from typing import Optional, Protocol


class KeyValueStorePort(Protocol):
    """Durable string key-value storage.

    Implementations raise `StorageReadError` / `StorageWriteError` on I/O
    failure; a missing key is not an error (`get` returns None).
    """

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...

    async def close(self) -> None:
        ...
