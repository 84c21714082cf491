"""Tests for settings loading and validation."""

import logging

import pytest
from pydantic import ValidationError
from slacklator.core.config import Settings, get_settings, reset_settings
from slacklator.core.logging_config import configure_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DEEPL_API_KEY", "REDIS_URL", "FALLBACK_LANGUAGE", "DEBUG"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.TRANSLATION_CACHE_TTL_SECONDS == 3600
        assert settings.TRANSLATION_CACHE_MAX_ENTRIES == 10000
        assert settings.POPULAR_PHRASE_THRESHOLD == 3
        assert settings.POPULAR_PHRASE_TTL_SECONDS == 86400
        assert settings.CHANNEL_SAMPLE_SIZE == 3
        assert settings.FALLBACK_LANGUAGE == "en"
        assert settings.TRANSLATION_SINGLE_FLIGHT is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DEEPL_API_KEY", "abc:fx")
        monkeypatch.setenv("REDIS_URL", "  redis://localhost:6379  ")
        settings = Settings(_env_file=None)
        assert settings.DEEPL_API_KEY == "abc:fx"
        assert settings.REDIS_URL == "redis://localhost:6379"

    def test_fallback_language_normalized(self):
        assert Settings(_env_file=None, FALLBACK_LANGUAGE=" DE ").FALLBACK_LANGUAGE == "de"

    @pytest.mark.parametrize("value", ["english", "e1", ""])
    def test_invalid_fallback_language(self, value):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, FALLBACK_LANGUAGE=value)

    @pytest.mark.parametrize(
        "field",
        ["TRANSLATION_CACHE_TTL_SECONDS", "TRANSLATION_CACHE_MAX_ENTRIES"],
    )
    def test_non_positive_cache_settings_rejected(self, field):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: 0})

    def test_threshold_must_be_at_least_one(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, POPULAR_PHRASE_THRESHOLD=0)

    def test_ledger_bound_must_not_be_negative(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, USAGE_LEDGER_MAX_RECORDS=-1)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_reset_settings_reloads(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("FALLBACK_LANGUAGE", "fr")
        reset_settings()
        second = get_settings()
        assert second is not first
        assert second.FALLBACK_LANGUAGE == "fr"


class TestLoggingConfig:
    def test_level_follows_debug_flag(self):
        configure_logging(Settings(_env_file=None, DEBUG=True))
        assert logging.getLogger().level == logging.DEBUG

        configure_logging(Settings(_env_file=None, DEBUG=False))
        assert logging.getLogger().level == logging.INFO

    def test_quiets_deepl_client(self):
        configure_logging(Settings(_env_file=None))
        assert logging.getLogger("deepl").level == logging.WARNING
