from __future__ import annotations

from typing import Optional

from watchpick.application.ports.key_value_store_port import KeyValueStorePort


class InMemoryKeyValueStore(KeyValueStorePort):
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def close(self) -> None:
        return None
