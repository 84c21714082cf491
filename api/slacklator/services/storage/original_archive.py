"""Archive of original (pre-translation) messages for "view original"."""

import logging
from typing import Optional

from pydantic import ValidationError

from slacklator.core.exceptions import PersistentStoreError
from slacklator.metrics.translation_metrics import store_degradations_total
from slacklator.models.translation import OriginalMessageRecord
from slacklator.services.storage.persistent_store import (
    NullStore,
    PersistentStoreProtocol,
)
from slacklator.services.translation.cache import TranslationCache

logger = logging.getLogger(__name__)

ORIGINAL_MESSAGE_TTL = 604800  # 7 days in seconds


def original_message_key(channel_id: str, ts: str) -> str:
    return f"original:{channel_id}:{ts}"


class OriginalMessageArchive:
    """Two-tier archive: bounded memory cache in front of the persistent store.

    Store hits are copied back into memory. A stored record that fails to
    parse is treated as absent.
    """

    def __init__(
        self,
        store: Optional[PersistentStoreProtocol] = None,
        cache: Optional[TranslationCache] = None,
        ttl: int = ORIGINAL_MESSAGE_TTL,
        maxsize: int = 5000,
    ):
        self.store = store if store is not None else NullStore()
        self.ttl = ttl
        self.cache: TranslationCache = (
            cache
            if cache is not None
            else TranslationCache(maxsize=maxsize, default_ttl=ttl, name="originals")
        )

    async def store_original(
        self,
        channel_id: str,
        ts: str,
        original: str,
        original_lang: str,
        translated: str,
        translated_lang: str,
    ) -> OriginalMessageRecord:
        """Archive the original text of a translated message.

        Returns:
            The archived record.
        """
        record = OriginalMessageRecord(
            original=original,
            original_lang=original_lang,
            translated=translated,
            translated_lang=translated_lang,
        )
        key = original_message_key(channel_id, ts)
        self.cache.set(key, record)
        try:
            await self.store.set_with_expiry(key, record.to_json(), self.ttl)
        except PersistentStoreError as e:
            store_degradations_total.labels(operation="set_with_expiry").inc()
            logger.warning(f"Could not persist original message {key}: {e}")
        return record

    async def get_original(
        self, channel_id: str, ts: str
    ) -> Optional[OriginalMessageRecord]:
        """Return the archived record, or None if unknown, expired or corrupt."""
        key = original_message_key(channel_id, ts)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            stored = await self.store.get(key)
        except PersistentStoreError as e:
            store_degradations_total.labels(operation="get").inc()
            logger.warning(f"Could not read original message {key}: {e}")
            return None
        if not stored:
            return None

        try:
            record = OriginalMessageRecord.model_validate_json(stored)
        except ValidationError:
            logger.warning(f"Ignoring malformed original message record {key}")
            return None

        self.cache.set(key, record)
        return record
