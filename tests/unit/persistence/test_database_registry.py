"""Unit tests for DatabaseRegistry."""

import pytest

from typedstore.infrastructure.persistence.database import DatabaseRegistry
from typedstore.infrastructure.persistence.stores import SQLiteDocumentStore, StoreOptions


class TestGetHandle:
    def test_handle_is_cached_per_name(self, settings) -> None:
        registry = DatabaseRegistry(settings)

        first = registry.get_handle("app", StoreOptions(memory=True))
        second = registry.get_handle("app")

        assert isinstance(first, SQLiteDocumentStore)
        assert first is second
        assert registry.get_handle("other", StoreOptions(memory=True)) is not first

    def test_later_options_are_ignored(self, settings) -> None:
        registry = DatabaseRegistry(settings)

        first = registry.get_handle("app", StoreOptions(memory=True))
        second = registry.get_handle("app", StoreOptions(memory=False, echo=True))

        assert second is first
        assert first.options.memory is True
        assert first.options.echo is False

    def test_data_dir_defaults_to_settings(self, settings) -> None:
        registry = DatabaseRegistry(settings)

        store = registry.get_handle("app")

        assert store.options.data_dir == settings.data_dir
        assert store.database_url.endswith("app.db")

    def test_memory_name(self, settings) -> None:
        registry = DatabaseRegistry(settings)

        store = registry.get_handle(":memory:")

        assert store.options.memory is True

    def test_caller_options_are_not_mutated(self, settings) -> None:
        registry = DatabaseRegistry(settings)
        options = StoreOptions()

        registry.get_handle("app", options)

        assert options.data_dir is None


class TestClearAll:
    @pytest.mark.asyncio
    async def test_clear_all_removes_every_document(self, settings) -> None:
        registry = DatabaseRegistry(settings)
        store = registry.get_handle("app", StoreOptions(memory=True))

        try:
            for doc_id in ("a", "b", "c"):
                await store.put({"_id": doc_id, "$collectionType": "Users"})

            await registry.clear_all("app")

            assert await store.scan_all() == []
            assert await store.query({}) == []
        finally:
            await store.close()

    @pytest.mark.asyncio
    async def test_clear_all_on_empty_database(self, settings) -> None:
        registry = DatabaseRegistry(settings)
        store = registry.get_handle("empty", StoreOptions(memory=True))

        try:
            await registry.clear_all("empty")
            assert await store.scan_all() == []
        finally:
            await store.close()
