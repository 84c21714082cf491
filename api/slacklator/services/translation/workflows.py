"""Platform-independent halves of the chat translation flows.

The chat glue layer (event handlers, slash commands, modals) calls these
methods and renders their results; nothing here knows about the platform.
"""

import asyncio
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from slacklator.models.translation import (
    OriginalMessageRecord,
    OutgoingTranslation,
    RecipientTranslation,
    UsageReport,
)
from slacklator.services.storage.original_archive import OriginalMessageArchive
from slacklator.services.storage.preferences import LanguagePreferenceService
from slacklator.services.translation.channel_sampler import ChannelLanguageSampler
from slacklator.services.translation.language_detector import LanguageDetector
from slacklator.services.translation.provider import (
    DEEPL_LANGUAGES,
    TranslationProviderProtocol,
)
from slacklator.services.translation.translation_engine import (
    BatchTranslation,
    TranslationEngine,
)

logger = logging.getLogger(__name__)

# Markers the bot puts in its own output; messages carrying them are not
# translated again.
TRANSLATION_MARKERS = ("🌐", "Translation:", "Translated from")

# Languages shown by "view message in all languages"
DEFAULT_VIEW_LANGUAGES = ("en", "es", "de", "fr", "it", "pt")


def supported_languages() -> List[str]:
    return sorted(DEEPL_LANGUAGES)


def is_supported_language(code: str) -> bool:
    return (code or "").strip().lower() in DEEPL_LANGUAGES


class MessageTranslationWorkflows:
    """Incoming, outgoing, archive and reporting flows over the shared components."""

    def __init__(
        self,
        engine: TranslationEngine,
        detector: LanguageDetector,
        sampler: ChannelLanguageSampler,
        preferences: LanguagePreferenceService,
        archive: OriginalMessageArchive,
        provider: TranslationProviderProtocol,
    ):
        self.engine = engine
        self.detector = detector
        self.sampler = sampler
        self.preferences = preferences
        self.archive = archive
        self.provider = provider

    @staticmethod
    def is_translation_echo(text: Optional[str]) -> bool:
        """True for the bot's own translated output."""
        return bool(text) and any(marker in text for marker in TRANSLATION_MARKERS)

    async def update_user_language(self, user_id: str, lang: str) -> bool:
        """Set a user's language if the provider supports it.

        Returns:
            False when the language is unsupported and nothing was stored.
        """
        lang = (lang or "").strip().lower()
        if not is_supported_language(lang):
            return False
        await self.preferences.set_user_language(user_id, lang)
        return True

    async def _translate_for(
        self, text: str, msg_lang: str, user_id: str
    ) -> Optional[RecipientTranslation]:
        user_lang = await self.preferences.get_user_language(user_id)
        if user_lang == msg_lang:
            return None
        translated = await self.engine.translate(text, user_lang, msg_lang)
        return RecipientTranslation(
            user_id=user_id,
            source_lang=msg_lang,
            target_lang=user_lang,
            text=translated,
        )

    async def translate_for_recipients(
        self, text: str, sender_id: str, recipient_ids: Iterable[str]
    ) -> List[RecipientTranslation]:
        """Translate an incoming message for every member who reads another language.

        The sender is skipped, as are members whose language matches the
        message. A failure for one member is logged and does not affect the
        others. Results keep the order of recipient_ids.
        """
        if not text or self.is_translation_echo(text):
            return []

        msg_lang = await self.detector.detect_language(text)
        recipients = [uid for uid in recipient_ids if uid != sender_id]
        results = await asyncio.gather(
            *(self._translate_for(text, msg_lang, uid) for uid in recipients),
            return_exceptions=True,
        )

        translations: List[RecipientTranslation] = []
        for user_id, result in zip(recipients, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(f"Translation for user {user_id} failed: {result}")
                continue
            if result is not None:
                translations.append(result)
        return translations

    async def translate_outgoing(self, channel_id: str, text: str) -> OutgoingTranslation:
        """Translate a user's message into the channel's sampled language.

        Raises:
            ProviderError: If the translation itself fails.
        """
        channel_lang = await self.sampler.sample_channel_language(channel_id)
        detected_lang = await self.detector.detect_language(text)
        outgoing = OutgoingTranslation(
            original=text, source_lang=detected_lang, channel_lang=channel_lang
        )
        if not outgoing.needs_translation:
            logger.info(f"No translation needed, already in {channel_lang}")
            return outgoing

        translated = await self.engine.translate(text, channel_lang, detected_lang)
        return outgoing.model_copy(update={"translated": translated})

    async def archive_outgoing(
        self, channel_id: str, ts: str, outgoing: OutgoingTranslation
    ) -> Optional[OriginalMessageRecord]:
        """Archive a posted translation so its original can be viewed later."""
        if outgoing.translated is None:
            return None
        await self.preferences.store_message_language(
            channel_id, ts, outgoing.channel_lang
        )
        return await self.archive.store_original(
            channel_id,
            ts,
            original=outgoing.original,
            original_lang=outgoing.source_lang,
            translated=outgoing.translated,
            translated_lang=outgoing.channel_lang,
        )

    async def view_in_all_languages(
        self, text: str, languages: Sequence[str] = DEFAULT_VIEW_LANGUAGES
    ) -> Tuple[str, BatchTranslation]:
        """Detect the message language and translate it into every other language."""
        msg_lang = await self.detector.detect_language(text)
        batch = await self.engine.translate_many(text, languages, msg_lang)
        return msg_lang, batch

    async def usage_report(self) -> UsageReport:
        """Combine provider quota usage with the savings counters.

        Detect-only provider requests count as API calls and detection cache
        hits as cache hits, since both consume or save provider characters.

        Raises:
            ProviderError: If the provider usage request fails.
        """
        usage = await self.provider.get_usage()
        stats = self.engine.get_stats()
        api_calls = stats["api_calls"] + self.detector.provider_detections
        cache_hits = stats["cache_hits"] + self.detector.cache_hits
        saved = cache_hits + stats["common_phrases_used"]
        total_requests = api_calls + saved
        return UsageReport(
            character_count=usage.character_count,
            character_limit=usage.character_limit,
            percent_used=usage.percent_used,
            remaining=usage.remaining,
            api_calls=api_calls,
            cache_hits=cache_hits,
            common_phrases_used=stats["common_phrases_used"],
            api_savings_percent=(
                round(saved / total_requests * 100) if total_requests > 0 else 0
            ),
            learned_phrases=stats["learned_phrases"],
        )
