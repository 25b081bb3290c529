"""Upsert strategies for reconciling an incoming document with a stored one.

When an upsert finds an existing document it asks a strategy for the
document to persist. Every built-in strategy keeps the stored revision so
the write is accepted as the successor of what is in the store.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from typedstore.domain.entities.document import REV_FIELD

Doc = dict[str, Any]


class UpsertMode(Enum):
    REPLACE = "replace"
    MERGE = "merge"
    CUSTOM = "custom"


@dataclass(frozen=True)
class UpsertHelper:
    """Merge/replace functions bound to one incoming item.

    Example:
        helper = upsert_helper({"_id": "u1", "name": "Ann2"})
        helper.merge({"_id": "u1", "_rev": "1-a", "name": "Ann", "age": 3})
        # {"_id": "u1", "_rev": "1-a", "name": "Ann2", "age": 3}
    """

    item: Doc

    def merge(self, existing: Doc) -> Doc:
        """Shallow union: stored fields overwritten by incoming ones."""
        return {**existing, **self.item, REV_FIELD: existing.get(REV_FIELD)}

    def replace(self, existing: Doc) -> Doc:
        """Incoming fields only, with the stored revision."""
        return {**self.item, REV_FIELD: existing.get(REV_FIELD)}


def upsert_helper(item: Doc) -> UpsertHelper:
    return UpsertHelper(item)


@dataclass(frozen=True)
class UpsertStrategy:
    """Tagged choice between replace, merge and a caller-supplied function.

    Use the ``REPLACE`` / ``MERGE`` constants or ``UpsertStrategy.custom(fn)``,
    where ``fn(existing)`` returns the document to persist.
    """

    mode: UpsertMode
    fn: Optional[Callable[[Doc], Doc]] = None

    @classmethod
    def replace(cls) -> "UpsertStrategy":
        return cls(UpsertMode.REPLACE)

    @classmethod
    def merge(cls) -> "UpsertStrategy":
        return cls(UpsertMode.MERGE)

    @classmethod
    def custom(cls, fn: Callable[[Doc], Doc]) -> "UpsertStrategy":
        if not callable(fn):
            raise TypeError("custom upsert strategy requires a callable")
        return cls(UpsertMode.CUSTOM, fn)

    def resolve(self, existing: Doc, incoming: Doc) -> Doc:
        """Return the document to persist for ``incoming`` over ``existing``."""
        if self.mode is UpsertMode.CUSTOM:
            return dict(self.fn(existing))

        helper = upsert_helper(incoming)
        if self.mode is UpsertMode.MERGE:
            return helper.merge(existing)
        return helper.replace(existing)


UpsertStrategy.REPLACE = UpsertStrategy.replace()
UpsertStrategy.MERGE = UpsertStrategy.merge()
