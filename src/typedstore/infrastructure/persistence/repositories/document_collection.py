"""Typed collections over a shared document store.

A DocumentCollection scopes every query and write to one discriminator
(``$collectionType``) inside a database shared with other collections. It
initializes lazily on first use, creating the indexes that every scoped
query relies on.
"""

import time
import uuid
from typing import Any, Iterable, Optional, Union

from typedstore.core.config import Settings
from typedstore.core.context import StoreContext, get_current_context
from typedstore.core.exceptions import (
    DocumentMissingError,
    DocumentNotFoundError,
    UpsertAbortedError,
    ValidatorUnavailableError,
)
from typedstore.core.hooks import HookEvent
from typedstore.core.logging import get_logger
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
    to_document,
)
from typedstore.domain.entities.hook_context import HookContext
from typedstore.domain.services.collection_lifecycle import CollectionLifecycle
from typedstore.domain.services.document_validator import Validator
from typedstore.domain.services.upsert_strategy import UpsertHelper, UpsertStrategy, upsert_helper
from typedstore.infrastructure.persistence.index_manager import CollectionIndexManager
from typedstore.infrastructure.persistence.selector_compiler import SortSpec
from typedstore.infrastructure.persistence.stores.sqlite_store import StoreOptions

logger = get_logger(__name__)

Item = Union[dict[str, Any], Document]


class DocumentCollection:
    """Query and mutation engine for one logical collection.

    The discriminator is given at construction, or declared by subclasses
    through the ``collection_type`` class attribute.

    Example:
        class Users(DocumentCollection):
            collection_type = "Users"

            async def before_init(self) -> None:
                await self.declare_index(["email"])

        users = Users("app")
        ann = await users.upsert({"name": "Ann", "email": "ann@example.com"})
        await users.find_one({"email": "ann@example.com"})
    """

    collection_type: Optional[str] = None

    def __init__(
        self,
        database: str,
        collection_type: Optional[str] = None,
        *,
        options: Optional[StoreOptions] = None,
        validation: ValidationLevel = ValidationLevel.OFF,
        validator: Optional[Validator] = None,
        context: Optional[StoreContext] = None,
    ) -> None:
        collection_type = collection_type or type(self).collection_type
        if not collection_type or not isinstance(collection_type, str):
            raise ValueError("collection_type must be a non-empty string")

        self.collection_type = collection_type
        self.database = database
        self.validation = validation
        self.validator = validator
        self.context = context or get_current_context()

        self.store = self.context.registry.get_handle(database, options)
        self._index_manager = CollectionIndexManager(self.store, collection_type)
        self._lifecycle = CollectionLifecycle(collection_type, self._initialize)

        if self.settings.log_operations:
            logger.info("Initializing collection", collection=collection_type, database=database)

    @property
    def settings(self) -> Settings:
        return self.context.settings

    @property
    def state(self) -> CollectionState:
        return self._lifecycle.state

    @property
    def indexes(self) -> tuple[IndexSpec, ...]:
        return self._index_manager.indexes

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def before_init(self) -> None:
        """Override to run work before the mandatory indexes are created."""
        pass

    async def after_init(self) -> None:
        """Override to run work after the mandatory indexes are created."""
        pass

    async def ensure_ready(self) -> None:
        """Initialize the collection on first use, or wait for it."""
        await self._lifecycle.ensure_ready(
            wait_attempts=self.settings.init_wait_attempts,
            wait_delay=self.settings.init_wait_delay,
        )

    async def _initialize(self) -> None:
        await self.before_init()
        await self._trigger(HookEvent.ON_COLLECTION_BEFORE_INIT, {})

        await self.declare_index([])
        await self.declare_index([TIMESTAMP_FIELD])

        await self.after_init()
        await self._trigger(HookEvent.ON_COLLECTION_AFTER_INIT, {})

    async def declare_index(self, fields: Iterable[str], name: Optional[str] = None) -> IndexSpec:
        """Declare an index on ``[$collectionType, *fields]``."""
        return await self._index_manager.declare_index(list(fields), name)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def find(
        self,
        selector: Optional[dict[str, Any]] = None,
        *,
        sort: Optional[SortSpec] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Return documents of this collection matching ``selector``.

        The caller's selector is copied; the discriminator always overrides
        any ``$collectionType`` it contains.
        """
        await self.ensure_ready()

        scoped = dict(selector or {})
        scoped[COLLECTION_TYPE_FIELD] = self.collection_type

        return await self.store.query(scoped, sort=sort, limit=limit)

    async def find_one(self, selector: Optional[dict[str, Any]] = None) -> Optional[dict[str, Any]]:
        matches = await self.find(selector, limit=1)
        return matches[0] if matches else None

    async def find_or_fail(
        self,
        selector: Optional[dict[str, Any]] = None,
        *,
        sort: Optional[SortSpec] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Like ``find``, but raise DocumentNotFoundError when nothing matches."""
        docs = await self.find(selector, sort=sort, limit=limit)
        if not docs:
            raise DocumentNotFoundError(self.collection_type, selector)
        return docs

    async def find_one_or_fail(self, selector: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        matches = await self.find_or_fail(selector, limit=1)
        return matches[0]

    async def find_by_id(self, doc_id: Optional[str]) -> Optional[dict[str, Any]]:
        if not doc_id:
            return None
        return await self.find_one({ID_FIELD: doc_id})

    async def find_by_id_or_fail(self, doc_id: str) -> dict[str, Any]:
        return await self.find_one_or_fail({ID_FIELD: doc_id})

    async def count(self, selector: Optional[dict[str, Any]] = None) -> int:
        return len(await self.find(selector))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @staticmethod
    def upsert_helper(item: Item) -> UpsertHelper:
        """Merge/replace functions bound to ``item``, for custom strategies."""
        return upsert_helper(to_document(item))

    async def upsert(self, item: Item, strategy: UpsertStrategy = UpsertStrategy.REPLACE) -> dict[str, Any]:
        """Create or update a document and return it as stored.

        When a document with the item's ``_id`` exists, ``strategy``
        reconciles the two (replace by default) and the write carries the
        stored revision, so a stale ``_rev`` on the item does not conflict.
        An id held by another collection is never overwritten.

        Raises:
            UpsertAbortedError: If a before-upsert hook aborts the write or fails
                with ``stop_on_error`` set.
            RevisionConflictError: If the id belongs to another collection.
            ValidationRejectedError: Under ON_AND_REJECT, for an invalid document.
            ValidatorUnavailableError: If validation is on and no validator is set.
        """
        await self.ensure_ready()

        doc = to_document(item)
        existing = await self.find_by_id(doc.get(ID_FIELD))

        if existing:
            doc = strategy.resolve(existing, doc)
            self._trace("Updating document", doc)
        else:
            # A revision from elsewhere must not authorize a forced overwrite
            doc.pop(REV_FIELD, None)
            self._trace("Creating document", doc)

        result = await self._trigger(HookEvent.ON_DOCUMENT_BEFORE_UPSERT, doc)
        if result.aborted:
            raise UpsertAbortedError(result.abort_message or "Upsert aborted by hook")
        if not result.success:
            raise UpsertAbortedError("; ".join(result.errors) or "Before-upsert hook failed")
        if isinstance(result.data, dict):
            doc = result.data

        self._validate(doc)
        self._set_meta_fields(doc)

        self._trace("Before save", doc)
        await self.store.put(doc, force=True)

        saved = await self.find_by_id(doc[ID_FIELD])
        self._trace("After save", saved)

        await self._trigger(HookEvent.ON_DOCUMENT_AFTER_UPSERT, dict(saved) if saved else {})
        return saved

    async def remove(self, item: Optional[Item]) -> None:
        """Remove a document by its ``_id`` and ``_rev``.

        None is a no-op, as is a document the store no longer holds.
        Revision conflicts propagate.
        """
        await self.ensure_ready()

        self._trace("Removing document", item)
        if item is None:
            return

        doc = to_document(item)
        try:
            await self.store.remove(doc.get(ID_FIELD), doc.get(REV_FIELD))
        except DocumentMissingError:
            logger.info(
                "Document already removed",
                collection=self.collection_type,
                doc_id=doc.get(ID_FIELD),
            )
            return

        await self._trigger(HookEvent.ON_DOCUMENT_AFTER_REMOVE, doc)

    async def remove_by_id(self, doc_id: str) -> None:
        doc = await self.find_by_id(doc_id)
        self._trace("Removing document by id", doc, doc_id=doc_id)
        if doc:
            await self.remove(doc)

    async def bulk_upsert(self, items: Iterable[Item]) -> list[BulkResult]:
        """Write many documents without looking up existing versions.

        Items that update an existing document must carry its current
        ``_rev``. Failures are reported per item, in input order.
        """
        await self.ensure_ready()

        docs = [self._set_meta_fields(to_document(item)) for item in items]
        return await self.store.bulk_write(docs)

    async def bulk_remove(self, items: Iterable[Item]) -> list[BulkResult]:
        """Write tombstones for many documents; failures are reported per item."""
        await self.ensure_ready()

        docs = [{**to_document(item), DELETED_FIELD: True} for item in items]
        return await self.store.bulk_write(docs)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _set_meta_fields(self, doc: dict[str, Any]) -> dict[str, Any]:
        if not doc.get(ID_FIELD):
            doc[ID_FIELD] = str(uuid.uuid4())
        doc[TIMESTAMP_FIELD] = int(time.time() * 1000)
        doc[COLLECTION_TYPE_FIELD] = self.collection_type
        return doc

    def _effective_validation(self) -> ValidationLevel:
        if self.validation is not ValidationLevel.OFF:
            return self.validation
        return self.settings.validation_level or ValidationLevel.OFF

    def _validate(self, doc: dict[str, Any]) -> None:
        level = self._effective_validation()
        if level is ValidationLevel.OFF:
            return

        validator = self.validator or self.context.validator
        if validator is None:
            raise ValidatorUnavailableError(
                f"Validation level {level.name} requires a validator for {self.collection_type}"
            )

        if level is ValidationLevel.ON_AND_REJECT:
            validator.validate_or_reject(doc)
            return

        violations = validator.validate(doc)
        if level is ValidationLevel.ON_AND_LOG or self.settings.log_operations:
            log = logger.warning if violations else logger.info
            log(
                "Document validation result",
                collection=self.collection_type,
                valid=not violations,
                violations=[str(v) for v in violations],
            )

    async def _trigger(self, event: str, data: dict[str, Any]):
        context = HookContext(collection_type=self.collection_type, database=self.database)
        return await self.context.hooks.trigger(event, data=data, context=context)

    def _trace(self, message: str, doc: Any, **fields: Any) -> None:
        if self.settings.log_operations:
            logger.info(message, collection=self.collection_type, document=doc, **fields)
