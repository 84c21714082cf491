"""Tests for the original-message archive."""

import json

import pytest
from slacklator.models.translation import OriginalMessageRecord
from slacklator.services.storage.original_archive import (
    OriginalMessageArchive,
    original_message_key,
)
from slacklator.services.translation.cache import TranslationCache


@pytest.fixture
def archive(memory_store, clock):
    cache = TranslationCache(maxsize=10, default_ttl=604800, clock=clock)
    return OriginalMessageArchive(memory_store, cache=cache)


class TestOriginalMessageArchive:
    @pytest.mark.asyncio
    async def test_store_and_get(self, archive):
        record = await archive.store_original(
            "C1", "1712.0001", "Hallo zusammen", "de", "Hello everyone", "en"
        )

        fetched = await archive.get_original("C1", "1712.0001")
        assert fetched == record
        assert fetched.original_lang == "de"
        assert fetched.translated == "Hello everyone"

    @pytest.mark.asyncio
    async def test_persisted_as_camel_case_json(self, archive, memory_store):
        await archive.store_original("C1", "1.0", "Hola", "es", "Hello", "en")

        key = original_message_key("C1", "1.0")
        payload = json.loads(memory_store.data[key])
        assert payload["originalLang"] == "es"
        assert payload["translatedLang"] == "en"
        assert isinstance(payload["timestamp"], int)
        assert memory_store.ttls[key] == 604800

    @pytest.mark.asyncio
    async def test_cold_read_from_store_is_cached(self, memory_store, clock):
        record = OriginalMessageRecord(
            original="Bonjour",
            original_lang="fr",
            translated="Hello",
            translated_lang="en",
            timestamp=1712000000000,
        )
        memory_store.data[original_message_key("C1", "2.0")] = record.to_json()
        archive = OriginalMessageArchive(
            memory_store, cache=TranslationCache(maxsize=10, clock=clock)
        )

        assert await archive.get_original("C1", "2.0") == record
        memory_store.fail = True
        assert await archive.get_original("C1", "2.0") == record

    @pytest.mark.asyncio
    async def test_unknown_message(self, archive):
        assert await archive.get_original("C1", "404.0") is None

    @pytest.mark.asyncio
    async def test_malformed_record_is_absent(self, archive, memory_store):
        memory_store.data[original_message_key("C1", "3.0")] = "{not json"
        assert await archive.get_original("C1", "3.0") is None

    @pytest.mark.asyncio
    async def test_incomplete_record_is_absent(self, archive, memory_store):
        memory_store.data[original_message_key("C1", "4.0")] = json.dumps(
            {"original": "Hola"}
        )
        assert await archive.get_original("C1", "4.0") is None

    @pytest.mark.asyncio
    async def test_store_failure_keeps_memory_copy(self, archive, memory_store):
        memory_store.fail = True
        await archive.store_original("C1", "5.0", "Ciao", "it", "Hi", "en")
        record = await archive.get_original("C1", "5.0")
        assert record.original == "Ciao"

    @pytest.mark.asyncio
    async def test_store_read_failure_returns_none(self, archive, memory_store):
        memory_store.fail = True
        assert await archive.get_original("C1", "6.0") is None

    @pytest.mark.asyncio
    async def test_memory_copy_expires(self, archive, memory_store, clock):
        await archive.store_original("C1", "7.0", "Olá", "pt", "Hello", "en")
        memory_store.data.clear()
        clock.advance(604801)
        assert await archive.get_original("C1", "7.0") is None
