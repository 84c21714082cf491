"""Translation Engine.

Resolves a translation from the cheapest tier that can answer it:
1. Phrase table (free, synchronous)
2. In-memory translation cache
3. The external provider (metered), whose answers are cached and counted
"""

import asyncio
import functools
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from slacklator.core.exceptions import ProviderError
from slacklator.metrics.translation_metrics import (
    translation_duration_seconds,
    translation_resolutions_total,
)
from slacklator.services.translation.cache import TranslationCache, make_translation_key
from slacklator.services.translation.phrase_table import PhraseTable
from slacklator.services.translation.provider import (
    TranslationProviderProtocol,
    to_provider_code,
)
from slacklator.services.translation.usage_ledger import UsageLedger

logger = logging.getLogger(__name__)


@dataclass
class BatchTranslation:
    """Per-language results of translate_many()."""

    translations: Dict[str, str] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)


class TranslationEngine:
    """Cost-aware translation orchestrator.

    A single instance is shared by every request handler in the process.
    Provider failures propagate as ProviderError; there is no fallback text.

    Concurrent cold-cache requests for the same key each reach the provider
    unless coalesce_inflight is enabled, in which case they share one call.
    """

    def __init__(
        self,
        provider: TranslationProviderProtocol,
        cache: Optional[TranslationCache] = None,
        usage_ledger: Optional[UsageLedger] = None,
        phrase_table: Optional[PhraseTable] = None,
        coalesce_inflight: bool = False,
    ):
        """Initialize the TranslationEngine.

        Args:
            provider: Authoritative translation provider.
            cache: Shared translation cache (a 10,000 entry / 1 hour one if omitted).
            usage_ledger: Usage ledger promoting popular phrases in the same cache.
            phrase_table: Static phrase table (the built-in one if omitted).
            coalesce_inflight: Share one provider call between concurrent
                requests for the same cache key.
        """
        self.provider = provider
        self.cache = cache if cache is not None else TranslationCache()
        self.usage_ledger = (
            usage_ledger if usage_ledger is not None else UsageLedger(self.cache)
        )
        self.phrases = phrase_table if phrase_table is not None else PhraseTable()
        self.coalesce_inflight = coalesce_inflight
        self._inflight: Dict[str, "asyncio.Future[str]"] = {}

        # Statistics
        self.stats = {
            "api_calls": 0,
            "cache_hits": 0,
            "common_phrases_used": 0,
            "translation_errors": 0,
            "coalesced_requests": 0,
        }

    @staticmethod
    def _observe(tier: str, start_time: float) -> None:
        translation_resolutions_total.labels(tier=tier).inc()
        translation_duration_seconds.labels(tier=tier).observe(
            max(0.0, time.perf_counter() - start_time)
        )

    async def translate(
        self, text: str, target_lang: str, source_lang: Optional[str] = None
    ) -> str:
        """Translate text into target_lang.

        Args:
            text: Text to translate.
            target_lang: Target language code (e.g. "es").
            source_lang: Source language code, or None to let the provider detect it.

        Returns:
            Translated text; the input itself when source_lang equals
            target_lang.

        Raises:
            ProviderError: If the provider call fails.
        """
        start_time = time.perf_counter()

        if source_lang and source_lang.lower() == target_lang.lower():
            logger.debug(f"Source and target are both {target_lang}, returning input")
            self._observe("same_language", start_time)
            return text

        common = self.phrases.lookup(text, target_lang)
        if common is not None:
            self.stats["common_phrases_used"] += 1
            logger.info(
                f"Common phrase translation: {text[:30]!r} -> {common!r} (no API call)"
            )
            self._observe("phrase_table", start_time)
            return common

        cache_key = make_translation_key(text, target_lang, source_lang)
        cached = self.cache.get(cache_key)
        if cached is not None:
            self.stats["cache_hits"] += 1
            logger.debug(f"Translation cache hit: {text[:30]!r} -> {target_lang}")
            self._observe("cache", start_time)
            return cached

        if self.coalesce_inflight:
            translated = await self._coalesced_provider_call(
                text, target_lang, source_lang, cache_key
            )
        else:
            translated = await self._provider_translate(
                text, target_lang, source_lang, cache_key
            )
        self._observe("provider", start_time)
        return translated

    async def _coalesced_provider_call(
        self,
        text: str,
        target_lang: str,
        source_lang: Optional[str],
        cache_key: str,
    ) -> str:
        pending = self._inflight.get(cache_key)
        if pending is not None:
            self.stats["coalesced_requests"] += 1
            logger.debug(f"Joining in-flight translation: {text[:30]!r}")
            return await asyncio.shield(pending)

        task = asyncio.ensure_future(
            self._provider_translate(text, target_lang, source_lang, cache_key)
        )
        self._inflight[cache_key] = task
        # The entry outlives a cancelled caller until the provider call ends
        task.add_done_callback(functools.partial(self._forget_inflight, cache_key))
        return await asyncio.shield(task)

    def _forget_inflight(self, cache_key: str, task: "asyncio.Future[str]") -> None:
        if self._inflight.get(cache_key) is task:
            del self._inflight[cache_key]
        if not task.cancelled():
            # Already logged by _provider_translate; mark as retrieved
            task.exception()

    async def _provider_translate(
        self,
        text: str,
        target_lang: str,
        source_lang: Optional[str],
        cache_key: str,
    ) -> str:
        self.stats["api_calls"] += 1
        logger.info(
            f"DeepL API translation: {text[:30]!r} "
            f"({source_lang or 'auto'} -> {target_lang})"
        )
        try:
            result = await self.provider.translate(
                text,
                source_lang or None,
                to_provider_code(target_lang),
                preserve_formatting=True,
                split_sentences="nonewlines",
            )
        except ProviderError as e:
            self.stats["translation_errors"] += 1
            logger.error(f"Translation failed: {e}")
            raise
        except Exception as e:
            self.stats["translation_errors"] += 1
            logger.error(f"Translation failed: {e}")
            raise ProviderError(str(e)) from e

        translated = result.text
        self.cache.set(cache_key, translated)
        self.usage_ledger.record_use(
            text, target_lang, translated, cache_key=cache_key
        )
        return translated

    async def translate_many(
        self,
        text: str,
        target_langs: Iterable[str],
        source_lang: Optional[str] = None,
    ) -> BatchTranslation:
        """Translate text into several languages concurrently.

        The source language itself is skipped. A failing language is reported
        in errors and does not affect the others.

        Args:
            text: Text to translate.
            target_langs: Target language codes.
            source_lang: Known source language, if any.

        Returns:
            BatchTranslation with successes and per-language error messages.
        """
        targets = [lang for lang in dict.fromkeys(target_langs) if lang != source_lang]
        results = await asyncio.gather(
            *(self.translate(text, lang, source_lang) for lang in targets),
            return_exceptions=True,
        )

        batch = BatchTranslation()
        for lang, result in zip(targets, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                batch.errors[lang] = str(result)
            else:
                batch.translations[lang] = result
        return batch

    def get_stats(self) -> Dict[str, Any]:
        """Get cost-optimization statistics.

        Returns:
            Dict with request counters, savings and cache statistics.
        """
        total_requests = (
            self.stats["api_calls"]
            + self.stats["cache_hits"]
            + self.stats["common_phrases_used"]
        )
        saved = self.stats["cache_hits"] + self.stats["common_phrases_used"]
        return {
            **self.stats,
            "total_requests": total_requests,
            "api_savings_percent": (
                round(saved / total_requests * 100) if total_requests > 0 else 0
            ),
            "learned_phrases": len(self.usage_ledger),
            "cache_stats": self.cache.get_stats(),
        }
