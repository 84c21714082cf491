"""Pydantic models for translation records and reports."""

import time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def _now_ms() -> int:
    return int(time.time() * 1000)


class OriginalMessageRecord(BaseModel):
    """Pre-translation content of a message posted on a user's behalf.

    Serialized with camelCase aliases, the shape stored in Redis.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    original: str
    original_lang: str = Field(..., alias="originalLang")
    translated: str
    translated_lang: str = Field(..., alias="translatedLang")
    timestamp: int = Field(default_factory=_now_ms, description="Epoch milliseconds")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class RecipientTranslation(BaseModel):
    """A translation to show privately to one channel member."""

    user_id: str
    source_lang: str
    target_lang: str
    text: str


class OutgoingTranslation(BaseModel):
    """Result of translating a user's message into the channel language."""

    original: str
    source_lang: str
    channel_lang: str
    translated: Optional[str] = None

    @property
    def needs_translation(self) -> bool:
        return self.source_lang != self.channel_lang

    @property
    def text_to_post(self) -> str:
        return self.translated if self.translated is not None else self.original


class UsageReport(BaseModel):
    """Provider quota usage combined with cost-optimization counters."""

    character_count: int
    character_limit: Optional[int] = None
    percent_used: int = 0
    remaining: Optional[int] = None
    api_calls: int = 0
    cache_hits: int = 0
    common_phrases_used: int = 0
    api_savings_percent: int = 0
    learned_phrases: int = 0
