"""Typed JSON codecs for persisted values.

Each storage key has exactly one schema. Decoding validates against it and
raises `StorageCorruptError` on mismatch instead of coercing to another type.
"""

from __future__ import annotations

from typing import Iterable

from pydantic import TypeAdapter, ValidationError

from watchpick.domain import StorageCorruptError, WatchlistItem

_WATCHLIST = TypeAdapter(list[WatchlistItem])
_FLAG = TypeAdapter(bool)
_TOKEN = TypeAdapter(str)


def encode_watchlist(items: Iterable[WatchlistItem]) -> str:
    return _WATCHLIST.dump_json(list(items)).decode("utf-8")


def decode_watchlist(raw: str, *, key: str) -> list[WatchlistItem]:
    try:
        return _WATCHLIST.validate_json(raw, strict=True)
    except ValidationError as exc:
        raise StorageCorruptError(key, f"stored watchlist under {key!r} is invalid: {exc.error_count()} error(s)") from exc


def encode_flag(value: bool) -> str:
    return _FLAG.dump_json(bool(value)).decode("utf-8")


def decode_flag(raw: str, *, key: str) -> bool:
    try:
        return _FLAG.validate_json(raw, strict=True)
    except ValidationError as exc:
        raise StorageCorruptError(key) from exc


def encode_token(value: str) -> str:
    return _TOKEN.dump_json(str(value)).decode("utf-8")


def decode_token(raw: str, *, key: str) -> str:
    try:
        return _TOKEN.validate_json(raw, strict=True)
    except ValidationError as exc:
        raise StorageCorruptError(key) from exc
