"""Pytest configuration for unit tests."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio

from typedstore.core.config import Settings
from typedstore.core.context import StoreContext
from typedstore.infrastructure.persistence.database import DatabaseRegistry
from typedstore.infrastructure.persistence.stores import SQLiteDocumentStore, StoreOptions

MEMORY_DB = ":memory:"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment, with a short init wait."""
    return Settings(
        _env_file=None,
        data_dir=str(tmp_path / "data"),
        init_wait_attempts=50,
        init_wait_delay=0.01,
    )


@pytest_asyncio.fixture
async def store_context(settings: Settings) -> AsyncGenerator[StoreContext, None]:
    """Create a fresh store context over in-memory SQLite.

    Collections bound to ``MEMORY_DB`` share one store handle per test.
    """
    context = StoreContext(settings=settings, registry=DatabaseRegistry(settings))

    yield context

    await context.registry.get_handle(MEMORY_DB).close()


@pytest_asyncio.fixture
async def sqlite_store() -> AsyncGenerator[SQLiteDocumentStore, None]:
    """Create a standalone in-memory document store."""
    store = SQLiteDocumentStore("test", StoreOptions(memory=True))

    yield store

    await store.close()
