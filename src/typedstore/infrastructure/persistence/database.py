"""Database registry: one cached store handle per database name.

Collections bound to the same name share the handle, and therefore the same
physical table, telling their documents apart by ``$collectionType``.
"""

import asyncio
from dataclasses import replace
from typing import Optional

from typedstore.core.config import Settings, get_settings
from typedstore.core.logging import get_logger
from typedstore.infrastructure.persistence.stores.base import DocumentStore
from typedstore.infrastructure.persistence.stores.sqlite_store import (
    MEMORY_NAME,
    SQLiteDocumentStore,
    StoreOptions,
)

logger = get_logger(__name__)


class DatabaseRegistry:
    """Registry of open document stores, keyed by database name.

    Handles are opened lazily on the first ``get_handle`` call for a name and
    stay open for the lifetime of the registry.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self._handles: dict[str, DocumentStore] = {}
        self._options: dict[str, StoreOptions] = {}

    def get_handle(self, name: str, options: Optional[StoreOptions] = None) -> DocumentStore:
        """Return the store for ``name``, opening it on first use.

        Options only apply to the first call for a name; later calls get the
        cached handle unchanged.

        Args:
            name: Database name. ``":memory:"`` always opens in memory.
            options: Store options; ``data_dir`` defaults to ``Settings.data_dir``.

        Returns:
            DocumentStore: The shared handle for this name.
        """
        if name in self._handles:
            if options is not None and options != self._options[name]:
                logger.warning(
                    "Store options ignored for already opened database",
                    database=name,
                )
            return self._handles[name]

        resolved = replace(options) if options is not None else StoreOptions()
        if name == MEMORY_NAME:
            resolved.memory = True
        if resolved.data_dir is None and not resolved.memory:
            resolved.data_dir = self.settings.data_dir

        store = SQLiteDocumentStore(name, resolved)
        self._handles[name] = store
        self._options[name] = options if options is not None else resolved
        logger.info(
            "Database handle opened",
            database=name,
            memory=resolved.memory,
            data_dir=resolved.data_dir,
        )
        return store

    async def clear_all(self, name: str) -> None:
        """Remove every live document in database ``name``.

        Removals run concurrently. This is not atomic: if one removal fails
        the first error propagates and the database is left partly cleared.
        """
        store = self.get_handle(name)
        rows = await store.scan_all()
        await asyncio.gather(*(store.remove(row["id"], row["rev"]) for row in rows))
        logger.info("Database cleared", database=name, removed=len(rows))

