"""Document store contract used by collections.

A store holds documents for any number of logical collections. It owns
identity (``_id``), revisions (``_rev``) and tombstones; collections only
build selectors and documents and delegate every read and write here.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from typedstore.domain.entities.document import BulkResult, WriteResult
from typedstore.infrastructure.persistence.selector_compiler import SortSpec


class DocumentStore(ABC):
    """Abstract document store handle.

    Attributes:
        name: Database name this handle was opened for.
    """

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    async def put(self, doc: dict[str, Any], force: bool = False) -> WriteResult:
        """Create or update a document.

        Updates must carry the current ``_rev`` unless ``force`` is set.

        Raises:
            RevisionConflictError: If the revision does not match.
            InvalidDocumentError: If the document has no id or cannot be stored.
        """
        pass

    @abstractmethod
    async def remove(self, doc_id: str, rev: Optional[str]) -> WriteResult:
        """Write a tombstone for a document.

        Raises:
            DocumentMissingError: If the store has no live document with that id.
            RevisionConflictError: If the revision does not match.
        """
        pass

    @abstractmethod
    async def query(
        self,
        selector: dict[str, Any],
        sort: Optional[SortSpec] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Return live documents matching a selector."""
        pass

    @abstractmethod
    async def create_index(self, fields: Sequence[str], name: Optional[str] = None) -> dict[str, str]:
        """Create an index on ``fields``; creating an existing index is a no-op.

        Returns:
            ``{"result": "created" | "exists", "name": index_name}``
        """
        pass

    @abstractmethod
    async def scan_all(self) -> list[dict[str, str]]:
        """Return ``{"id", "rev"}`` for every live document."""
        pass

    @abstractmethod
    async def bulk_write(self, docs: Sequence[dict[str, Any]]) -> list[BulkResult]:
        """Write several documents, reporting each outcome independently.

        Returns:
            One WriteResult or WriteError per input document, in input order.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release connections held by this handle."""
        pass
