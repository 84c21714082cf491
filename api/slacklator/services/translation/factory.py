"""Construction of the shared translation components.

Everything is built once per process and handed to the request handlers,
so all handlers share the same cache, ledger and preferences.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from slacklator.core.config import Settings, get_settings
from slacklator.core.exceptions import ConfigurationError
from slacklator.services.storage.original_archive import OriginalMessageArchive
from slacklator.services.storage.persistent_store import (
    PersistentStoreProtocol,
    create_store,
)
from slacklator.services.storage.preferences import LanguagePreferenceService
from slacklator.services.translation.cache import TranslationCache
from slacklator.services.translation.channel_sampler import (
    ChannelLanguageSampler,
    MessageHistorySource,
)
from slacklator.services.translation.language_detector import LanguageDetector
from slacklator.services.translation.provider import (
    DeepLProvider,
    TranslationProviderProtocol,
)
from slacklator.services.translation.translation_engine import TranslationEngine
from slacklator.services.translation.usage_ledger import UsageLedger
from slacklator.services.translation.workflows import MessageTranslationWorkflows

logger = logging.getLogger(__name__)


@dataclass
class TranslationComponents:
    cache: TranslationCache
    usage_ledger: UsageLedger
    engine: TranslationEngine
    detector: LanguageDetector
    sampler: ChannelLanguageSampler
    store: PersistentStoreProtocol
    preferences: LanguagePreferenceService
    archive: OriginalMessageArchive
    workflows: MessageTranslationWorkflows


def build_translation_components(
    history: MessageHistorySource,
    settings: Optional[Settings] = None,
    provider: Optional[TranslationProviderProtocol] = None,
    store: Optional[PersistentStoreProtocol] = None,
) -> TranslationComponents:
    """Build the component graph from settings.

    Args:
        history: Message history collaborator for channel sampling.
        settings: Settings to use (the cached application settings if omitted).
        provider: Provider override; a DeepLProvider is built if omitted.
        store: Store override; chosen from REDIS_URL if omitted.

    Raises:
        ConfigurationError: If no provider is given and DEEPL_API_KEY is empty.
    """
    settings = settings or get_settings()

    if provider is None:
        if not settings.DEEPL_API_KEY:
            raise ConfigurationError("DEEPL_API_KEY", "required for translation")
        provider = DeepLProvider(api_key=settings.DEEPL_API_KEY)

    if store is None:
        store = create_store(settings.REDIS_URL)

    # Translations and detections share one cache, as one bounded pool
    cache: TranslationCache = TranslationCache(
        maxsize=settings.TRANSLATION_CACHE_MAX_ENTRIES,
        default_ttl=settings.TRANSLATION_CACHE_TTL_SECONDS,
    )
    usage_ledger = UsageLedger(
        cache,
        threshold=settings.POPULAR_PHRASE_THRESHOLD,
        promoted_ttl=settings.POPULAR_PHRASE_TTL_SECONDS,
        max_records=settings.USAGE_LEDGER_MAX_RECORDS,
    )
    engine = TranslationEngine(
        provider,
        cache=cache,
        usage_ledger=usage_ledger,
        coalesce_inflight=settings.TRANSLATION_SINGLE_FLIGHT,
    )
    detector = LanguageDetector(
        provider, cache=cache, fallback_language=settings.FALLBACK_LANGUAGE
    )
    sampler = ChannelLanguageSampler(
        detector,
        history,
        sample_size=settings.CHANNEL_SAMPLE_SIZE,
        min_chars=settings.CHANNEL_SAMPLE_MIN_CHARS,
        fallback_language=settings.FALLBACK_LANGUAGE,
    )
    preferences = LanguagePreferenceService(
        store,
        default_language=settings.FALLBACK_LANGUAGE,
        message_language_ttl=settings.ORIGINAL_MESSAGE_TTL_SECONDS,
    )
    archive = OriginalMessageArchive(
        store,
        ttl=settings.ORIGINAL_MESSAGE_TTL_SECONDS,
        maxsize=settings.ORIGINAL_MESSAGE_MAX_ENTRIES,
    )
    workflows = MessageTranslationWorkflows(
        engine, detector, sampler, preferences, archive, provider
    )

    backend = "redis" if store.available else "memory"
    logger.info(
        f"Translation components ready (store={backend}, "
        f"single_flight={settings.TRANSLATION_SINGLE_FLIGHT})"
    )
    return TranslationComponents(
        cache=cache,
        usage_ledger=usage_ledger,
        engine=engine,
        detector=detector,
        sampler=sampler,
        store=store,
        preferences=preferences,
        archive=archive,
        workflows=workflows,
    )
