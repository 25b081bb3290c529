"""SQLite document store using SQLAlchemy 2.0 async and aiosqlite.

Documents for every logical collection live in a single ``documents`` table.
Queries and indexes use SQLite JSON1 expressions over the JSON body; see
``selector_compiler`` for the selector language.
"""

import asyncio
import hashlib
import json
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from typedstore.core.exceptions import (
    DocumentMissingError,
    InvalidDocumentError,
    InvalidSelectorError,
    RevisionConflictError,
    StoreError,
)
from typedstore.core.logging import get_logger
from typedstore.domain.entities.document import (
    DELETED_FIELD,
    ID_FIELD,
    REV_FIELD,
    STORE_FIELDS,
    BulkResult,
    WriteError,
    WriteResult,
)
from typedstore.infrastructure.persistence.models import Base, DocumentModel
from typedstore.infrastructure.persistence.selector_compiler import (
    SelectorCompiler,
    SortSpec,
    field_expression,
)
from typedstore.infrastructure.persistence.stores.base import DocumentStore

logger = get_logger(__name__)

MEMORY_NAME = ":memory:"
INDEX_NAME_PATTERN = re.compile(r"[^A-Za-z0-9_]+")


@dataclass
class StoreOptions:
    """Options used when opening a store.

    Attributes:
        memory: Keep the database in memory instead of a file.
        data_dir: Directory holding ``<name>.db`` files.
        echo: Log every SQL statement through SQLAlchemy.
    """

    memory: bool = False
    data_dir: Optional[str] = None
    echo: bool = False


def make_revision(generation: int) -> str:
    return f"{generation}-{uuid.uuid4().hex}"


def revision_generation(rev: Optional[str]) -> int:
    """Return the numeric generation prefix of a revision (0 if unparseable)."""
    if not rev:
        return 0
    head = rev.split("-", 1)[0]
    return int(head) if head.isdigit() else 0


def default_index_name(fields: Sequence[str]) -> str:
    """Readable index name, suffixed with a digest of the exact field list."""
    readable = "_".join(INDEX_NAME_PATTERN.sub("", f) for f in fields)
    digest = hashlib.sha1(json.dumps(list(fields)).encode("utf-8")).hexdigest()[:8]
    return f"idx_{readable}_{digest}"


class SQLiteDocumentStore(DocumentStore):
    """Document store backed by a SQLite database.

    Statements are serialized with an asyncio lock: SQLite has a single
    writer, and in-memory databases share one connection.

    Example:
        store = SQLiteDocumentStore("app", StoreOptions(memory=True))
        ack = await store.put({"_id": "a", "name": "Ann"})
        docs = await store.query({"name": "Ann"})
    """

    def __init__(self, name: str, options: Optional[StoreOptions] = None) -> None:
        super().__init__(name)
        self.options = options or StoreOptions()
        if name == MEMORY_NAME:
            self.options.memory = True
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._schema_ready = False
        self._lock = asyncio.Lock()

    @property
    def database_url(self) -> str:
        if self.options.memory:
            return "sqlite+aiosqlite:///:memory:"
        data_dir = Path(self.options.data_dir or ".")
        return f"sqlite+aiosqlite:///{data_dir / f'{self.name}.db'}"

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine."""
        if self._engine is None:
            if self.options.memory:
                self._engine = create_async_engine(
                    self.database_url,
                    echo=self.options.echo,
                    connect_args={"check_same_thread": False},
                    poolclass=StaticPool,
                )
            else:
                Path(self.options.data_dir or ".").mkdir(parents=True, exist_ok=True)
                self._engine = create_async_engine(
                    self.database_url,
                    echo=self.options.echo,
                    connect_args={"check_same_thread": False},
                )
            logger.info("Document store engine created", database=self.name, url=self.database_url)
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._session_factory

    async def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self._schema_ready = True
        logger.debug("Document table ensured", database=self.name)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def put(self, doc: dict[str, Any], force: bool = False) -> WriteResult:
        async with self._lock:
            await self._ensure_schema()
            async with self.session_factory() as session:
                result = await self._write(session, doc, force)
                await session.commit()
        return result

    async def remove(self, doc_id: str, rev: Optional[str]) -> WriteResult:
        tombstone = {ID_FIELD: doc_id, REV_FIELD: rev, DELETED_FIELD: True}
        return await self.put(tombstone)

    async def bulk_write(self, docs: Sequence[dict[str, Any]]) -> list[BulkResult]:
        results: list[BulkResult] = []
        async with self._lock:
            await self._ensure_schema()
            async with self.session_factory() as session:
                for doc in docs:
                    try:
                        results.append(await self._write(session, doc, force=False))
                    except StoreError as e:
                        results.append(WriteError(id=e.doc_id, error=e.error, reason=e.reason))
                await session.commit()

        logger.debug(
            "Bulk write completed",
            database=self.name,
            total=len(results),
            failed=sum(1 for r in results if not r.ok),
        )
        return results

    async def _write(self, session: AsyncSession, doc: dict[str, Any], force: bool) -> WriteResult:
        """Apply one write inside ``session``.

        All checks happen before the row is touched, so a failed item leaves
        the session unchanged.
        """
        doc_id = doc.get(ID_FIELD)
        if not doc_id or not isinstance(doc_id, str):
            raise InvalidDocumentError("Document must have a string _id", None)

        supplied_rev = doc.get(REV_FIELD)
        deleting = bool(doc.get(DELETED_FIELD))

        body = {k: v for k, v in doc.items() if k not in STORE_FIELDS}
        try:
            payload = "{}" if deleting else json.dumps(body)
        except (TypeError, ValueError) as e:
            raise InvalidDocumentError(f"Document is not JSON serializable: {e}", doc_id)

        row = await session.get(DocumentModel, doc_id)

        if row is None or row.deleted:
            if deleting:
                raise DocumentMissingError(doc_id)
            if row is None and supplied_rev and not force:
                raise RevisionConflictError(doc_id)
        elif supplied_rev != row.rev and (deleting or not force or not supplied_rev):
            # Forcing never lets a write without _rev replace a live document
            raise RevisionConflictError(doc_id)

        new_rev = make_revision(revision_generation(row.rev if row else None) + 1)

        if row is None:
            session.add(DocumentModel(id=doc_id, rev=new_rev, deleted=False, doc=payload))
            # Later items in the same batch must see this row
            await session.flush()
        else:
            row.rev = new_rev
            row.deleted = deleting
            row.doc = payload

        return WriteResult(id=doc_id, rev=new_rev)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def query(
        self,
        selector: dict[str, Any],
        sort: Optional[SortSpec] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        compiler = SelectorCompiler()
        where_clause, params = compiler.compile(selector)
        order_clause = compiler.compile_sort(sort)

        sql = f"SELECT id, rev, doc FROM documents WHERE deleted = 0 AND ({where_clause})"
        if order_clause:
            sql += f" ORDER BY {order_clause}"
        if limit is not None:
            if limit < 0:
                raise InvalidSelectorError(f"Invalid limit: {limit}")
            params["limit"] = limit
            sql += " LIMIT :limit"

        async with self._lock:
            await self._ensure_schema()
            async with self.session_factory() as session:
                result = await session.execute(text(sql), params)
                rows = result.fetchall()

        return [{ID_FIELD: row.id, REV_FIELD: row.rev, **json.loads(row.doc)} for row in rows]

    async def scan_all(self) -> list[dict[str, str]]:
        async with self._lock:
            await self._ensure_schema()
            async with self.session_factory() as session:
                result = await session.execute(
                    text("SELECT id, rev FROM documents WHERE deleted = 0 ORDER BY id")
                )
                rows = result.fetchall()
        return [{"id": row.id, "rev": row.rev} for row in rows]

    # ------------------------------------------------------------------
    # Indexes
    # ------------------------------------------------------------------

    async def create_index(self, fields: Sequence[str], name: Optional[str] = None) -> dict[str, str]:
        if not fields:
            raise InvalidSelectorError("Index requires at least one field")

        expressions = ", ".join(field_expression(f) for f in fields)
        index_name = INDEX_NAME_PATTERN.sub("_", name) if name else default_index_name(fields)

        async with self._lock:
            await self._ensure_schema()
            async with self.engine.begin() as conn:
                existing = await conn.execute(
                    text("SELECT 1 FROM sqlite_master WHERE type = 'index' AND name = :name"),
                    {"name": index_name},
                )
                if existing.first() is not None:
                    return {"result": "exists", "name": index_name}

                await conn.execute(
                    text(f'CREATE INDEX IF NOT EXISTS "{index_name}" ON documents ({expressions})')
                )

        logger.info("Index created", database=self.name, index=index_name, fields=list(fields))
        return {"result": "created", "name": index_name}

    async def close(self) -> None:
        """Dispose the engine and all connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            self._schema_ready = False
            logger.info("Document store engine disposed", database=self.name)
