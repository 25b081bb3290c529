"""Unit tests for CollectionIndexManager."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from typedstore.domain.entities.document import IndexSpec
from typedstore.infrastructure.persistence.index_manager import CollectionIndexManager


@pytest.fixture
def mock_store():
    store = MagicMock()
    store.create_index = AsyncMock(return_value={"result": "created", "name": "idx"})
    return store


class TestDeclareIndex:
    @pytest.mark.asyncio
    async def test_prefixes_discriminator(self, mock_store) -> None:
        manager = CollectionIndexManager(mock_store, "Users")

        spec = await manager.declare_index(["email"], name="by_email")

        assert spec == IndexSpec(fields=("$collectionType", "email"), name="by_email")
        mock_store.create_index.assert_awaited_once_with(["$collectionType", "email"], "by_email")

    @pytest.mark.asyncio
    async def test_empty_fields_index_discriminator_only(self, mock_store) -> None:
        manager = CollectionIndexManager(mock_store, "Users")

        await manager.declare_index([])

        mock_store.create_index.assert_awaited_once_with(["$collectionType"], None)

    @pytest.mark.asyncio
    async def test_caller_list_not_mutated(self, mock_store) -> None:
        manager = CollectionIndexManager(mock_store, "Users")
        fields = ["email"]

        await manager.declare_index(fields)

        assert fields == ["email"]

    @pytest.mark.asyncio
    async def test_declarations_are_recorded_without_dedup(self, mock_store) -> None:
        manager = CollectionIndexManager(mock_store, "Users")

        await manager.declare_index(["email"])
        await manager.declare_index(["email"])

        assert len(manager.indexes) == 2
        assert mock_store.create_index.await_count == 2

    @pytest.mark.asyncio
    async def test_against_sqlite_store(self, sqlite_store) -> None:
        manager = CollectionIndexManager(sqlite_store, "Users")

        await manager.declare_index(["email"])
        await manager.declare_index(["email"])

        result = await sqlite_store.create_index(["$collectionType", "email"])
        assert result["result"] == "exists"
