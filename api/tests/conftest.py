"""
Pytest configuration and fixtures for the Slacklator translation core.

This module provides:
- A controllable clock for TTL tests
- A stub translation provider with call tracking
- An in-memory persistent store that can be switched into failure mode
- Pre-wired engine/detector fixtures sharing one cache
"""

from typing import Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from slacklator.core.config import Settings
from slacklator.core.exceptions import PersistentStoreError
from slacklator.services.translation.cache import TranslationCache
from slacklator.services.translation.language_detector import LanguageDetector
from slacklator.services.translation.provider import ProviderResult, ProviderUsage
from slacklator.services.translation.translation_engine import TranslationEngine
from slacklator.services.translation.usage_ledger import UsageLedger


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryStore:
    """PersistentStoreProtocol double backed by a dict."""

    def __init__(self):
        self.data: Dict[str, str] = {}
        self.ttls: Dict[str, int] = {}
        self.fail = False
        self.calls = 0

    @property
    def available(self) -> bool:
        return True

    def _check(self, operation: str) -> None:
        self.calls += 1
        if self.fail:
            raise PersistentStoreError("connection refused", operation=operation)

    async def get(self, key: str) -> Optional[str]:
        self._check("get")
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._check("set")
        self.data[key] = value

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        self._check("set_with_expiry")
        self.data[key] = value
        self.ttls[key] = ttl_seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TranslationCache:
    return TranslationCache(maxsize=100, default_ttl=3600, clock=clock)


@pytest.fixture
def mock_provider():
    """Provider stub returning a fixed Spanish translation."""
    provider = MagicMock()
    provider.translate = AsyncMock(
        return_value=ProviderResult(
            text="El clima es agradable hoy", detected_source_lang="EN"
        )
    )
    provider.get_usage = AsyncMock(
        return_value=ProviderUsage(character_count=250000, character_limit=500000)
    )
    return provider


@pytest.fixture
def usage_ledger(cache: TranslationCache) -> UsageLedger:
    return UsageLedger(cache, threshold=3, promoted_ttl=86400)


@pytest.fixture
def engine(mock_provider, cache, usage_ledger) -> TranslationEngine:
    return TranslationEngine(mock_provider, cache=cache, usage_ledger=usage_ledger)


@pytest.fixture
def detector(mock_provider, cache) -> LanguageDetector:
    return LanguageDetector(mock_provider, cache=cache)


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the environment's DeepL/Redis configuration."""
    return Settings(
        DEEPL_API_KEY="test-deepl-key",
        REDIS_URL="",
        ENVIRONMENT="testing",
    )
