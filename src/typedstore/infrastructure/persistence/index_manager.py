"""Index declarations for a single collection."""

from typing import Optional, Sequence

from typedstore.core.logging import get_logger
from typedstore.domain.entities.document import COLLECTION_TYPE_FIELD, IndexSpec
from typedstore.infrastructure.persistence.stores.base import DocumentStore

logger = get_logger(__name__)


class CollectionIndexManager:
    """Registers indexes for one collection, discriminator first.

    Every declared field list is prefixed with ``$collectionType`` so the
    index serves selectors built by the collection. Declarations are not
    de-duplicated here; the store treats re-creating an index as a no-op.
    """

    def __init__(self, store: DocumentStore, collection_type: str) -> None:
        self.store = store
        self.collection_type = collection_type
        self._indexes: list[IndexSpec] = []

    @property
    def indexes(self) -> tuple[IndexSpec, ...]:
        return tuple(self._indexes)

    async def declare_index(self, fields: Sequence[str], name: Optional[str] = None) -> IndexSpec:
        """Record an index and ask the store to create it.

        Args:
            fields: Field names after the discriminator. The sequence is
                copied, never modified.
            name: Optional index name.

        Returns:
            IndexSpec: The registered spec, including the discriminator.
        """
        spec = IndexSpec(fields=(COLLECTION_TYPE_FIELD, *fields), name=name)
        self._indexes.append(spec)

        response = await self.store.create_index(list(spec.fields), name)
        logger.debug(
            "Index declared",
            collection=self.collection_type,
            fields=list(spec.fields),
            result=response.get("result"),
            index=response.get("name"),
        )
        return spec
