"""Tests for user/channel language preferences with write-through persistence."""

import pytest
from slacklator.services.storage.preferences import (
    LanguagePreferenceService,
    channel_language_key,
    message_language_key,
    user_language_key,
)


class TestKeys:
    def test_key_formats(self):
        assert user_language_key("U1") == "user:U1:lang"
        assert channel_language_key("C1") == "channel:C1:lang"
        assert message_language_key("C1", "1712.0001") == "msg:C1:1712.0001:lang"


class TestLanguagePreferenceService:
    @pytest.mark.asyncio
    async def test_unset_user_gets_default(self, memory_store):
        service = LanguagePreferenceService(memory_store)
        assert await service.get_user_language("U1") == "en"

    @pytest.mark.asyncio
    async def test_set_writes_through(self, memory_store):
        service = LanguagePreferenceService(memory_store)
        await service.set_user_language("U1", "de")

        assert await service.get_user_language("U1") == "de"
        assert memory_store.data["user:U1:lang"] == "de"

    @pytest.mark.asyncio
    async def test_memory_answers_without_store_read(self, memory_store):
        service = LanguagePreferenceService(memory_store)
        await service.set_channel_language("C1", "fr")
        calls = memory_store.calls

        assert await service.get_channel_language("C1") == "fr"
        assert memory_store.calls == calls

    @pytest.mark.asyncio
    async def test_cold_start_reads_store_once(self, memory_store):
        memory_store.data["user:U1:lang"] = "ja"
        service = LanguagePreferenceService(memory_store)

        assert await service.get_user_language("U1") == "ja"
        assert await service.get_user_language("U1") == "ja"
        assert memory_store.calls == 1

    @pytest.mark.asyncio
    async def test_store_failure_keeps_memory_value(self, memory_store):
        memory_store.fail = True
        service = LanguagePreferenceService(memory_store)

        await service.set_user_language("U1", "es")

        assert await service.get_user_language("U1") == "es"
        assert "user:U1:lang" not in memory_store.data

    @pytest.mark.asyncio
    async def test_store_failure_on_read_returns_default(self, memory_store):
        memory_store.fail = True
        service = LanguagePreferenceService(memory_store, default_language="pt")
        assert await service.get_channel_language("C1") == "pt"

    @pytest.mark.asyncio
    async def test_without_store_is_memory_only(self):
        service = LanguagePreferenceService()
        await service.set_user_language("U1", "it")
        assert await service.get_user_language("U1") == "it"
        assert await service.get_user_language("U2") == "en"

    @pytest.mark.asyncio
    async def test_message_language_has_expiry(self, memory_store):
        service = LanguagePreferenceService(memory_store)
        await service.store_message_language("C1", "1712.0001", "es")

        assert memory_store.ttls["msg:C1:1712.0001:lang"] == 604800
        assert await service.get_thread_language("C1", "1712.0001") == "es"

    @pytest.mark.asyncio
    async def test_thread_language_unknown(self, memory_store):
        service = LanguagePreferenceService(memory_store)
        assert await service.get_thread_language("C1", None) is None
        assert await service.get_thread_language("C1", "999.0") is None

    @pytest.mark.asyncio
    async def test_thread_language_store_failure(self, memory_store):
        memory_store.fail = True
        service = LanguagePreferenceService(memory_store)
        await service.store_message_language("C1", "1.0", "es")
        assert await service.get_thread_language("C1", "1.0") is None
