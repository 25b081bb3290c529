"""Document store implementations."""

from typedstore.infrastructure.persistence.stores.base import DocumentStore
from typedstore.infrastructure.persistence.stores.sqlite_store import (
    SQLiteDocumentStore,
    StoreOptions,
)

__all__ = ["DocumentStore", "SQLiteDocumentStore", "StoreOptions"]
