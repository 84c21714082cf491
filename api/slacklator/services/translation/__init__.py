"""Translation package for cost-optimized chat translation.

This package provides:
- PhraseTable: Free answers for common short phrases
- PatternDetector: Stop-word language guessing without API calls
- TranslationCache: Bounded in-memory TTL cache
- UsageLedger: Popular phrase tracking and cache promotion
- TranslationEngine: Phrase table -> cache -> provider orchestration
- LanguageDetector: Cached heuristic detection with provider fallback
- ChannelLanguageSampler: Channel language by majority over recent messages
- MessageTranslationWorkflows: Incoming/outgoing flows for the chat layer
"""

from slacklator.services.translation.cache import (
    TranslationCache,
    make_detection_key,
    make_translation_key,
)
from slacklator.services.translation.channel_sampler import (
    ChannelLanguageSampler,
    HistoryMessage,
    MessageHistorySource,
)
from slacklator.services.translation.language_detector import LanguageDetector
from slacklator.services.translation.pattern_detector import PatternDetector
from slacklator.services.translation.phrase_table import COMMON_PHRASES, PhraseTable
from slacklator.services.translation.provider import (
    DEEPL_LANGUAGES,
    DeepLProvider,
    ProviderResult,
    ProviderUsage,
    TranslationProviderProtocol,
)
from slacklator.services.translation.translation_engine import (
    BatchTranslation,
    TranslationEngine,
)
from slacklator.services.translation.usage_ledger import UsageLedger, UsageRecord

__all__ = [
    "BatchTranslation",
    "COMMON_PHRASES",
    "ChannelLanguageSampler",
    "DEEPL_LANGUAGES",
    "DeepLProvider",
    "HistoryMessage",
    "LanguageDetector",
    "MessageHistorySource",
    "PatternDetector",
    "PhraseTable",
    "ProviderResult",
    "ProviderUsage",
    "TranslationCache",
    "TranslationEngine",
    "TranslationProviderProtocol",
    "UsageLedger",
    "UsageRecord",
    "make_detection_key",
    "make_translation_key",
]
