"""typedstore - typed collections over a schemaless document store.

Many logical collections share one SQLite-backed document database, each
scoped by a ``$collectionType`` discriminator and initialized on first use.
"""

__version__ = "0.1.0"

from typedstore.core.config import Settings, get_settings
from typedstore.core.context import StoreContext, get_current_context, use_context
from typedstore.core.exceptions import (
    DocumentMissingError,
    DocumentNotFoundError,
    InvalidDocumentError,
    InvalidSelectorError,
    RevisionConflictError,
    StoreError,
    TypedStoreError,
    UninitializedCollectionError,
    UpsertAbortedError,
    ValidationRejectedError,
    ValidatorUnavailableError,
)
from typedstore.core.hooks import HookEvent, HookRegistry
from typedstore.core.logging import configure_logging, get_logger
from typedstore.domain.entities import (
    AbortHookException,
    CollectionState,
    Document,
    IndexSpec,
    ValidationLevel,
    WriteError,
    WriteResult,
)
from typedstore.domain.services import (
    DocumentViolation,
    PydanticValidator,
    UpsertStrategy,
    Validator,
    upsert_helper,
)
from typedstore.infrastructure.persistence.database import DatabaseRegistry
from typedstore.infrastructure.persistence.repositories import DocumentCollection
from typedstore.infrastructure.persistence.stores import (
    DocumentStore,
    SQLiteDocumentStore,
    StoreOptions,
)

__all__ = [
    "__version__",
    "AbortHookException",
    "CollectionState",
    "DatabaseRegistry",
    "Document",
    "DocumentCollection",
    "DocumentMissingError",
    "DocumentNotFoundError",
    "DocumentStore",
    "DocumentViolation",
    "HookEvent",
    "HookRegistry",
    "IndexSpec",
    "InvalidDocumentError",
    "InvalidSelectorError",
    "PydanticValidator",
    "RevisionConflictError",
    "SQLiteDocumentStore",
    "Settings",
    "StoreContext",
    "StoreError",
    "StoreOptions",
    "TypedStoreError",
    "UninitializedCollectionError",
    "UpsertAbortedError",
    "UpsertStrategy",
    "ValidationLevel",
    "ValidationRejectedError",
    "Validator",
    "ValidatorUnavailableError",
    "WriteError",
    "WriteResult",
    "configure_logging",
    "get_current_context",
    "get_logger",
    "get_settings",
    "upsert_helper",
]
