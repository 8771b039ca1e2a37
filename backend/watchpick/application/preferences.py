from __future__ import annotations

import logging
from typing import Optional

from watchpick.application.codecs import decode_flag, decode_token, encode_flag, encode_token
from watchpick.application.ports.key_value_store_port import KeyValueStorePort
from watchpick.domain import StorageError

logger = logging.getLogger(__name__)

DEFAULT_HAS_LAUNCHED_KEY = "has_launched"
DEFAULT_USER_TOKEN_KEY = "user_token"


class Preferences:
    """Onboarding flag and session token, each under its own typed key.

    Failures are logged and answered with the safe default (not launched,
    no token); they never propagate to the caller.
    """

    def __init__(
        self,
        *,
        storage: KeyValueStorePort,
        has_launched_key: str = DEFAULT_HAS_LAUNCHED_KEY,
        user_token_key: str = DEFAULT_USER_TOKEN_KEY,
    ) -> None:
        self._storage = storage
        self._has_launched_key = has_launched_key
        self._user_token_key = user_token_key

    async def get_has_launched(self) -> bool:
        try:
            raw = await self._storage.get(self._has_launched_key)
            if raw is None:
                return False
            return decode_flag(raw, key=self._has_launched_key)
        except StorageError as exc:
            logger.error("Error getting has_launched: %s", exc)
            return False

    async def set_has_launched(self) -> bool:
        try:
            await self._storage.set(self._has_launched_key, encode_flag(True))
        except StorageError as exc:
            logger.error("Error setting has_launched: %s", exc)
            return False
        return True

    async def reset_onboarding(self) -> bool:
        try:
            await self._storage.delete(self._has_launched_key)
        except StorageError as exc:
            logger.error("Error resetting onboarding: %s", exc)
            return False
        return True

    async def get_user_token(self) -> Optional[str]:
        try:
            raw = await self._storage.get(self._user_token_key)
            if raw is None:
                return None
            return decode_token(raw, key=self._user_token_key) or None
        except StorageError as exc:
            logger.error("Error getting user token: %s", exc)
            return None

    async def set_user_token(self, token: str) -> bool:
        try:
            await self._storage.set(self._user_token_key, encode_token(token))
        except StorageError as exc:
            logger.error("Error setting user token: %s", exc)
            return False
        return True

    async def remove_user_token(self) -> bool:
        try:
            await self._storage.delete(self._user_token_key)
        except StorageError as exc:
            logger.error("Error removing user token: %s", exc)
            return False
        return True
