"""Optional persistence: preferences and original message archive."""

from slacklator.services.storage.original_archive import OriginalMessageArchive
from slacklator.services.storage.persistent_store import (
    NullStore,
    PersistentStoreProtocol,
    RedisStore,
    create_store,
)
from slacklator.services.storage.preferences import LanguagePreferenceService

__all__ = [
    "LanguagePreferenceService",
    "NullStore",
    "OriginalMessageArchive",
    "PersistentStoreProtocol",
    "RedisStore",
    "create_store",
]
