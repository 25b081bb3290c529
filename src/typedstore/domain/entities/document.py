"""Document entity definitions.

Documents are schemaless mappings. The fields below are reserved: the store
owns ``_id``/``_rev``/``_deleted`` and collections own ``$timestamp`` and
``$collectionType``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

ID_FIELD = "_id"
REV_FIELD = "_rev"
DELETED_FIELD = "_deleted"
TIMESTAMP_FIELD = "$timestamp"
COLLECTION_TYPE_FIELD = "$collectionType"

STORE_FIELDS = frozenset({ID_FIELD, REV_FIELD, DELETED_FIELD})


class CollectionState(Enum):
    """Lifecycle states of a collection instance."""

    NEW = "new"
    INITIALIZING = "initializing"
    READY = "ready"


class ValidationLevel(Enum):
    """How strictly documents are validated before a write.

    OFF skips validation. ON and ON_AND_LOG validate and only log the
    outcome (ON logs only when operation logging is enabled). ON_AND_REJECT
    fails the write when violations are found.
    """

    OFF = 0
    ON = 1
    ON_AND_LOG = 2
    ON_AND_REJECT = 3


class Document(BaseModel):
    """Base model for typed documents.

    Reserved fields are exposed under Python-friendly names and serialized
    under their stored names. Extra fields are kept as-is, so any document
    read from the store can be loaded into a subclass.

    Example:
        class User(Document):
            name: str
            email: str

        await users.upsert(User(name="Ann", email="ann@example.com"))
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[str] = Field(default=None, alias=ID_FIELD)
    rev: Optional[str] = Field(default=None, alias=REV_FIELD)
    deleted: Optional[bool] = Field(default=None, alias=DELETED_FIELD)
    timestamp: Optional[int] = Field(default=None, alias=TIMESTAMP_FIELD)
    collection_type: Optional[str] = Field(default=None, alias=COLLECTION_TYPE_FIELD)


@dataclass(frozen=True)
class IndexSpec:
    """A declared composite index.

    Attributes:
        fields: Ordered field names, discriminator first.
        name: Optional index name passed to the store.
    """

    fields: tuple[str, ...]
    name: Optional[str] = None


@dataclass
class WriteResult:
    """Successful write acknowledgment from the store."""

    id: str
    rev: str
    ok: bool = True


@dataclass
class WriteError:
    """Per-item failure reported by a bulk write."""

    id: Optional[str]
    error: str
    reason: str
    ok: bool = field(default=False, init=False)


BulkResult = Union[WriteResult, WriteError]


def to_document(item: Union[dict[str, Any], Document, None]) -> dict[str, Any]:
    """Return a shallow dict copy of a document or pydantic Document."""
    if item is None:
        return {}
    if isinstance(item, BaseModel):
        return item.model_dump(by_alias=True, exclude_none=True)
    return dict(item)
