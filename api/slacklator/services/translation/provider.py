"""
Translation provider interface and the DeepL implementation.

The engine only talks to the provider through TranslationProviderProtocol,
so tests and alternative backends can stand in for DeepL.

Usage:
    provider = DeepLProvider(api_key=settings.DEEPL_API_KEY)
    result = await provider.translate("Guten Tag", None, "EN-US")
    result.text, result.detected_source_lang
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import deepl

from slacklator.core.exceptions import ProviderError, ProviderQuotaError
from slacklator.metrics.translation_metrics import (
    provider_calls_total,
    provider_errors_total,
)

logger = logging.getLogger(__name__)

# Chat language code -> DeepL target language code
DEEPL_LANGUAGES: Dict[str, str] = {
    "bg": "BG",
    "cs": "CS",
    "da": "DA",
    "de": "DE",
    "el": "EL",
    "en": "EN-US",
    "es": "ES",
    "et": "ET",
    "fi": "FI",
    "fr": "FR",
    "hu": "HU",
    "id": "ID",
    "it": "IT",
    "ja": "JA",
    "ko": "KO",
    "lt": "LT",
    "lv": "LV",
    "nb": "NB",
    "nl": "NL",
    "pl": "PL",
    "pt": "PT-PT",
    "ro": "RO",
    "ru": "RU",
    "sk": "SK",
    "sl": "SL",
    "sv": "SV",
    "tr": "TR",
    "uk": "UK",
    "zh": "ZH",
}

# Target used for detect-only requests; only the detected source matters
DETECT_TARGET_LANG = DEEPL_LANGUAGES["en"]


def to_provider_code(lang: str) -> str:
    """Map a chat language code to the provider's code.

    Unknown codes are passed through uppercased and left for the provider
    to reject.
    """
    return DEEPL_LANGUAGES.get(lang, lang.upper())


@dataclass
class ProviderResult:
    """Translated text plus the source language the provider saw."""

    text: str
    detected_source_lang: Optional[str] = None


@dataclass
class ProviderUsage:
    """Character quota accounting for the current billing period."""

    character_count: int
    character_limit: Optional[int] = None

    @property
    def percent_used(self) -> int:
        if not self.character_limit:
            return 0
        return round(self.character_count / self.character_limit * 100)

    @property
    def remaining(self) -> Optional[int]:
        if self.character_limit is None:
            return None
        return self.character_limit - self.character_count


@runtime_checkable
class TranslationProviderProtocol(Protocol):
    """Protocol for authoritative translation, detection and usage accounting."""

    async def translate(
        self,
        text: str,
        source_lang: Optional[str],
        target_lang: str,
        *,
        preserve_formatting: bool = True,
        split_sentences: str = "nonewlines",
        detect_only: bool = False,
    ) -> ProviderResult:
        """Translate text.

        detect_only marks a request made only for detected_source_lang
        (source_lang=None, target DETECT_TARGET_LANG); the translated text is
        discarded by the caller.
        """
        ...

    async def get_usage(self) -> ProviderUsage:
        """Return character usage for the current billing period."""
        ...


class DeepLProvider:
    """TranslationProviderProtocol backed by the official deepl client.

    The deepl client is synchronous; calls run in a worker thread so they
    don't block the event loop. Timeouts and retries are left to the client.
    """

    def __init__(self, api_key: str = "", translator: Optional[Any] = None):
        """Initialize the provider.

        Args:
            api_key: DeepL authentication key.
            translator: Pre-built deepl.Translator (or a test double).
        """
        if translator is None:
            if not api_key:
                raise ValueError("DEEPL_API_KEY is required for DeepLProvider")
            translator = deepl.Translator(api_key)
        self.translator = translator

    async def translate(
        self,
        text: str,
        source_lang: Optional[str],
        target_lang: str,
        *,
        preserve_formatting: bool = True,
        split_sentences: str = "nonewlines",
        detect_only: bool = False,
    ) -> ProviderResult:
        operation = "detect" if detect_only else "translate"
        provider_calls_total.labels(operation=operation).inc()
        try:
            result = await asyncio.to_thread(
                self.translator.translate_text,
                text,
                source_lang=source_lang.upper() if source_lang else None,
                target_lang=target_lang,
                preserve_formatting=preserve_formatting,
                formality="default",
                split_sentences=split_sentences,
            )
        except deepl.QuotaExceededException as e:
            provider_errors_total.labels(operation=operation).inc()
            raise ProviderQuotaError(str(e)) from e
        except deepl.DeepLException as e:
            provider_errors_total.labels(operation=operation).inc()
            raise ProviderError(str(e)) from e

        if isinstance(result, list):
            result = result[0]
        detected = getattr(result, "detected_source_lang", None)
        return ProviderResult(
            text=result.text,
            detected_source_lang=str(detected) if detected else None,
        )

    async def get_usage(self) -> ProviderUsage:
        provider_calls_total.labels(operation="usage").inc()
        try:
            usage = await asyncio.to_thread(self.translator.get_usage)
        except deepl.DeepLException as e:
            provider_errors_total.labels(operation="usage").inc()
            raise ProviderError(str(e)) from e
        character = usage.character
        return ProviderUsage(
            character_count=character.count or 0,
            character_limit=character.limit,
        )
