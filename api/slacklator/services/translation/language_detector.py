"""Language detector with cached stop-word heuristics first, provider fallback."""

import asyncio
import logging
from typing import Optional

from slacklator.core.exceptions import ProviderDetectError
from slacklator.metrics.translation_metrics import language_detection_total
from slacklator.services.translation.cache import TranslationCache, make_detection_key
from slacklator.services.translation.pattern_detector import PatternDetector
from slacklator.services.translation.provider import (
    DETECT_TARGET_LANG,
    TranslationProviderProtocol,
)

logger = logging.getLogger(__name__)


class LanguageDetector:
    """Detect a text's language as cheaply as possible.

    Order: detection cache, PatternDetector, then a detect-only provider
    request. Detection is best-effort: provider failures resolve to the
    fallback language and are never raised.
    """

    def __init__(
        self,
        provider: Optional[TranslationProviderProtocol],
        cache: Optional[TranslationCache] = None,
        pattern_detector: Optional[PatternDetector] = None,
        fallback_language: str = "en",
    ):
        self.provider = provider
        self.cache = cache if cache is not None else TranslationCache()
        self.patterns = pattern_detector or PatternDetector()
        self.fallback_language = fallback_language
        # Provider-backed detections and detection cache hits, for usage reports
        self.provider_detections = 0
        self.cache_hits = 0

    @staticmethod
    def _emit_metrics(backend: str, language: str) -> None:
        language_detection_total.labels(backend=backend, result=language).inc()

    async def detect_language(self, text: str) -> str:
        """Return the language code of text.

        Args:
            text: Text to inspect.

        Returns:
            Lowercase language code; the fallback language if nothing worked.
        """
        if not (text or "").strip():
            self._emit_metrics("empty_input", self.fallback_language)
            return self.fallback_language

        cache_key = make_detection_key(text)
        cached = self.cache.get(cache_key)
        if cached:
            self.cache_hits += 1
            self._emit_metrics("cache", cached)
            return cached

        fast_result = self.patterns.detect(text)
        if fast_result:
            logger.debug(f"Fast language detection: {fast_result} (no API call)")
            self.cache.set(cache_key, fast_result)
            self._emit_metrics("pattern", fast_result)
            return fast_result

        try:
            language = await self._detect_with_provider(text)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Language detection error, using fallback: {e}")
            self._emit_metrics("fallback", self.fallback_language)
            return self.fallback_language

        self.cache.set(cache_key, language)
        self._emit_metrics("provider", language)
        return language

    async def _detect_with_provider(self, text: str) -> str:
        if self.provider is None:
            raise ProviderDetectError("no provider configured")

        logger.info(f"Using DeepL API for language detection: {text[:30]!r}")
        self.provider_detections += 1
        try:
            result = await self.provider.translate(
                text, None, DETECT_TARGET_LANG, detect_only=True
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise ProviderDetectError(str(e)) from e

        if not result.detected_source_lang:
            raise ProviderDetectError("provider reported no source language")
        return result.detected_source_lang.lower()
