from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from watchpick.application.ports.key_value_store_port import KeyValueStorePort
from watchpick.infrastructure.config.settings import STORAGE_BACKEND, STORAGE_DIR
from watchpick.infrastructure.persistence.file_key_value_store import FileKeyValueStore
from watchpick.infrastructure.persistence.in_memory_key_value_store import InMemoryKeyValueStore

logger = logging.getLogger(__name__)


def build_key_value_store(
    *,
    backend: Optional[str] = None,
    root: Optional[Union[str, Path]] = None,
) -> KeyValueStorePort:
    kind = (backend or STORAGE_BACKEND or "file").strip().lower()
    if kind == "memory":
        logger.warning("Using in-memory storage; data is lost on exit")
        return InMemoryKeyValueStore()
    if kind != "file":
        raise ValueError(f"unsupported STORAGE_BACKEND={kind!r} (expected 'file' or 'memory')")
    return FileKeyValueStore(root=root or STORAGE_DIR)
