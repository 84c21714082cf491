"""Frequency tracking for provider-backed translations.

Phrases translated often enough get their cache entry promoted to a longer
lifetime, so repeat traffic stops reaching the provider.
"""

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from slacklator.metrics.translation_metrics import popular_phrase_promotions_total
from slacklator.services.translation.cache import TranslationCache, make_translation_key
from slacklator.services.translation.phrase_table import normalize_phrase

logger = logging.getLogger(__name__)


@dataclass
class UsageRecord:
    occurrence_count: int
    last_translation: str


class UsageLedger:
    """Counts translations per (normalized text, target language).

    Promotion fires once, on the use that brings the count up to the
    threshold. Records live for the whole process unless max_records is set.
    """

    def __init__(
        self,
        cache: TranslationCache,
        threshold: int = 3,
        promoted_ttl: int = 86400,
        max_records: int = 0,
    ):
        """Initialize the ledger.

        Args:
            cache: Cache holding the entries to promote.
            threshold: Occurrence count that triggers promotion.
            promoted_ttl: Lifetime in seconds for promoted entries (24 hours).
            max_records: Bound on tracked pairs, 0 for unbounded.
        """
        self.cache = cache
        self.threshold = threshold
        self.promoted_ttl = promoted_ttl
        self.max_records = max_records
        self._records: OrderedDict[Tuple[str, str], UsageRecord] = OrderedDict()
        self._lock = threading.RLock()
        self.promotions = 0

    def record_use(
        self,
        text: str,
        target_lang: str,
        translation: str,
        cache_key: Optional[str] = None,
    ) -> UsageRecord:
        """Record one provider-backed translation of text into target_lang.

        Args:
            text: Source text (normalized here, so raw text is fine).
            target_lang: Target language code.
            translation: The translation just produced.
            cache_key: Cache entry to promote; defaults to the auto-source key.

        Returns:
            Snapshot of the updated record.
        """
        key = (normalize_phrase(text), target_lang)
        with self._lock:
            record = self._records.get(key)
            if record is None:
                record = UsageRecord(occurrence_count=0, last_translation=translation)
                self._records[key] = record
                self._enforce_bound()
            record.occurrence_count += 1
            record.last_translation = translation
            promote = record.occurrence_count == self.threshold
            snapshot = UsageRecord(record.occurrence_count, record.last_translation)

        if promote:
            self._promote(
                cache_key or make_translation_key(text, target_lang),
                translation,
                text,
                snapshot.occurrence_count,
            )
        return snapshot

    def _enforce_bound(self) -> None:
        if self.max_records <= 0:
            return
        while len(self._records) > self.max_records:
            self._records.popitem(last=False)

    def _promote(self, cache_key: str, translation: str, text: str, count: int) -> None:
        try:
            self.cache.set(cache_key, translation, ttl=self.promoted_ttl)
        except Exception:
            logger.warning(
                f"Failed to extend cache for popular phrase: {text[:30]!r}",
                exc_info=True,
            )
            return
        self.promotions += 1
        popular_phrase_promotions_total.inc()
        logger.info(
            f"Extended cache for popular phrase: {text[:30]!r} (used {count} times)"
        )

    def get(self, text: str, target_lang: str) -> Optional[UsageRecord]:
        with self._lock:
            record = self._records.get((normalize_phrase(text), target_lang))
            if record is None:
                return None
            return UsageRecord(record.occurrence_count, record.last_translation)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "learned_phrases": len(self._records),
                "promotions": self.promotions,
                "threshold": self.threshold,
            }
