from __future__ import annotations

import asyncio
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

from watchpick.application.ports.key_value_store_port import KeyValueStorePort
from watchpick.domain import StorageCorruptError, StorageError, StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9_.@-]+$")


class FileKeyValueStore(KeyValueStorePort):
    """One UTF-8 file per key under `root`.

    Writes go to a temp file in the same directory and are swapped in with
    `os.replace`, so a crash mid-write leaves the previous value intact.
    Blocking file I/O runs in a worker thread.
    """

    def __init__(self, *, root: Union[str, Path]) -> None:
        self._root = Path(root).expanduser()

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str, error: type[StorageError]) -> Path:
        if not _KEY_RE.match(key or "") or key.startswith("."):
            raise error(f"invalid storage key: {key!r}")
        return self._root / f"{key}.json"

    async def get(self, key: str) -> Optional[str]:
        path = self._path(key, StorageReadError)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as exc:
            raise StorageCorruptError(key, f"stored value for {key!r} is not valid UTF-8") from exc
        except OSError as exc:
            raise StorageReadError(f"failed to read {path}: {exc}") from exc

    async def set(self, key: str, value: str) -> None:
        path = self._path(key, StorageWriteError)
        try:
            await asyncio.to_thread(self._write_atomic, path, value)
        except OSError as exc:
            raise StorageWriteError(f"failed to write {path}: {exc}") from exc
        logger.debug("stored key=%s bytes=%s", key, len(value))

    @staticmethod
    def _write_atomic(path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    async def delete(self, key: str) -> None:
        path = self._path(key, StorageWriteError)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as exc:
            raise StorageWriteError(f"failed to delete {path}: {exc}") from exc

    async def close(self) -> None:
        return None
