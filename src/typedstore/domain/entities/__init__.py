"""Domain entities for typedstore.

Entities are plain Python types describing documents, lifecycle states and
write results. They have no dependencies on the storage layer.
"""

from typedstore.domain.entities.document import (
    COLLECTION_TYPE_FIELD,
    DELETED_FIELD,
    ID_FIELD,
    REV_FIELD,
    TIMESTAMP_FIELD,
    BulkResult,
    CollectionState,
    Document,
    IndexSpec,
    ValidationLevel,
    WriteError,
    WriteResult,
    to_document,
)
from typedstore.domain.entities.hook_context import (
    AbortHookException,
    HookContext,
    HookResult,
)

__all__ = [
    "AbortHookException",
    "BulkResult",
    "COLLECTION_TYPE_FIELD",
    "CollectionState",
    "DELETED_FIELD",
    "Document",
    "HookContext",
    "HookResult",
    "ID_FIELD",
    "IndexSpec",
    "REV_FIELD",
    "TIMESTAMP_FIELD",
    "ValidationLevel",
    "WriteError",
    "WriteResult",
    "to_document",
]
