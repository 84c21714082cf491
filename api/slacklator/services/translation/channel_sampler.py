"""Infer a channel's dominant language from a few recent messages."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence, runtime_checkable

from slacklator.services.translation.language_detector import LanguageDetector

logger = logging.getLogger(__name__)


@dataclass
class HistoryMessage:
    text: Optional[str]
    is_bot: bool = False
    timestamp: Optional[str] = None


@runtime_checkable
class MessageHistorySource(Protocol):
    """Protocol for the chat platform's message history."""

    async def fetch_recent_messages(
        self, channel_id: str, limit: int
    ) -> Sequence[HistoryMessage]:
        """Return up to limit recent messages of the channel."""
        ...


class ChannelLanguageSampler:
    """Detects a channel's language by majority vote over a small sample.

    The sample size caps provider cost per call. Results are not cached:
    channel membership drifts, so every call samples again.
    """

    def __init__(
        self,
        detector: LanguageDetector,
        history: MessageHistorySource,
        sample_size: int = 3,
        min_chars: int = 10,
        fallback_language: str = "en",
    ):
        """Initialize the sampler.

        Args:
            detector: Language detector used per message.
            history: Message history collaborator.
            sample_size: Number of recent messages fetched.
            min_chars: Messages must be longer than this to be analyzed.
            fallback_language: Returned when nothing qualifies.
        """
        self.detector = detector
        self.history = history
        self.sample_size = sample_size
        self.min_chars = min_chars
        self.fallback_language = fallback_language

    def _qualifies(self, message: HistoryMessage) -> bool:
        return (
            bool(message.text)
            and not message.is_bot
            and len(message.text) > self.min_chars
        )

    async def sample_channel_language(self, channel_id: str) -> str:
        """Return the most common language among recent channel messages.

        Ties go to the language observed first in the sample.

        Args:
            channel_id: Channel to sample.

        Returns:
            Language code; the fallback language if no message qualified or
            the history could not be fetched.
        """
        try:
            messages = await self.history.fetch_recent_messages(
                channel_id, self.sample_size
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Error detecting channel language: {e}")
            return self.fallback_language

        counts: Dict[str, int] = {}
        analyzed: List[str] = []
        for message in list(messages)[: self.sample_size]:
            if not self._qualifies(message):
                continue
            lang = await self.detector.detect_language(message.text or "")
            counts[lang] = counts.get(lang, 0) + 1
            analyzed.append(lang)

        if not analyzed:
            logger.info(
                f"No qualifying messages in {channel_id}, "
                f"defaulting to {self.fallback_language}"
            )
            return self.fallback_language

        primary, best = self.fallback_language, 0
        for lang, count in counts.items():
            if count > best:
                primary, best = lang, count
        logger.info(
            f"Channel {channel_id} language: {primary} "
            f"({best}/{len(analyzed)} messages analyzed)"
        )
        return primary
