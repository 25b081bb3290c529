"""Domain services for typedstore.

Services hold collection logic that does not depend on a concrete store:
the initialization state machine, upsert strategies and validation.
"""

from typedstore.domain.services.collection_lifecycle import CollectionLifecycle
from typedstore.domain.services.document_validator import (
    DocumentViolation,
    PydanticValidator,
    Validator,
)
from typedstore.domain.services.upsert_strategy import (
    UpsertHelper,
    UpsertMode,
    UpsertStrategy,
    upsert_helper,
)

__all__ = [
    "CollectionLifecycle",
    "DocumentViolation",
    "PydanticValidator",
    "UpsertHelper",
    "UpsertMode",
    "UpsertStrategy",
    "Validator",
    "upsert_helper",
]
