"""User and channel language preferences.

Memory is authoritative for the process lifetime. The persistent store is
written through on every change and only read on a memory miss (cold start).
"""

import logging
import threading
from typing import Dict, Optional

from slacklator.core.exceptions import PersistentStoreError
from slacklator.metrics.translation_metrics import store_degradations_total
from slacklator.services.storage.persistent_store import (
    NullStore,
    PersistentStoreProtocol,
)

logger = logging.getLogger(__name__)

MESSAGE_LANGUAGE_TTL = 604800  # 7 days in seconds


def user_language_key(user_id: str) -> str:
    return f"user:{user_id}:lang"


def channel_language_key(channel_id: str) -> str:
    return f"channel:{channel_id}:lang"


def message_language_key(channel_id: str, ts: str) -> str:
    return f"msg:{channel_id}:{ts}:lang"


class LanguagePreferenceService:
    """Reads and writes per-user and per-channel language preferences."""

    def __init__(
        self,
        store: Optional[PersistentStoreProtocol] = None,
        default_language: str = "en",
        message_language_ttl: int = MESSAGE_LANGUAGE_TTL,
    ):
        self.store = store if store is not None else NullStore()
        self.default_language = default_language
        self.message_language_ttl = message_language_ttl
        self._user_preferences: Dict[str, str] = {}
        self._channel_preferences: Dict[str, str] = {}
        self._lock = threading.RLock()

    @staticmethod
    def _degraded(operation: str, key: str, error: PersistentStoreError) -> None:
        store_degradations_total.labels(operation=operation).inc()
        logger.warning(
            f"Persistent store unavailable for {key}, using memory only: {error}"
        )

    async def _load(self, memory: Dict[str, str], key_id: str, store_key: str) -> str:
        with self._lock:
            if key_id in memory:
                return memory[key_id]

        try:
            lang = await self.store.get(store_key)
        except PersistentStoreError as e:
            self._degraded("get", store_key, e)
            lang = None

        if lang:
            with self._lock:
                # A set() that raced with the store read wins
                return memory.setdefault(key_id, lang)

        logger.debug(f"No language found for {store_key}, defaulting")
        return self.default_language

    async def _save(
        self, memory: Dict[str, str], key_id: str, store_key: str, lang: str
    ) -> None:
        with self._lock:
            memory[key_id] = lang
        logger.info(f"Set {store_key} to {lang}")
        try:
            await self.store.set(store_key, lang)
        except PersistentStoreError as e:
            self._degraded("set", store_key, e)

    async def get_user_language(self, user_id: str) -> str:
        """Return the user's preferred language (the default if unset)."""
        return await self._load(
            self._user_preferences, user_id, user_language_key(user_id)
        )

    async def set_user_language(self, user_id: str, lang: str) -> None:
        await self._save(
            self._user_preferences, user_id, user_language_key(user_id), lang
        )

    async def get_channel_language(self, channel_id: str) -> str:
        """Return the channel's configured language (the default if unset)."""
        return await self._load(
            self._channel_preferences, channel_id, channel_language_key(channel_id)
        )

    async def set_channel_language(self, channel_id: str, lang: str) -> None:
        await self._save(
            self._channel_preferences,
            channel_id,
            channel_language_key(channel_id),
            lang,
        )

    async def store_message_language(
        self, channel_id: str, ts: str, language: str
    ) -> None:
        """Remember the language of a posted message for thread replies."""
        key = message_language_key(channel_id, ts)
        try:
            await self.store.set_with_expiry(key, language, self.message_language_ttl)
        except PersistentStoreError as e:
            self._degraded("set_with_expiry", key, e)

    async def get_thread_language(
        self, channel_id: str, thread_ts: Optional[str]
    ) -> Optional[str]:
        """Return the language of a thread's parent message, if known."""
        if not thread_ts:
            return None
        key = message_language_key(channel_id, thread_ts)
        try:
            return await self.store.get(key)
        except PersistentStoreError as e:
            self._degraded("get", key, e)
            return None
