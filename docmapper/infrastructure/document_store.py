"""SQL Document Store — document-database surface over a single JSON table.

Invariants:
    - Collections are namespaces inside the documents table, created on first insert
    - Queries are immutable; get() executes collection + identifier constraints in SQL
      and every other predicate in Python (infrastructure/predicates.py)
    - A WriteBatch runs in ONE transaction: all writes apply or none do
    - Updating a missing document fails the whole batch (StoreCommitError)
    - Deleting a missing document is a no-op reporting 0 rows
    - Snapshots hand out copies: mutating to_dict() never touches stored state

Design Decisions:
    - Firestore-shaped API (collection/where/limit/get, document refs, batches):
      the mapping core depends only on core/store_protocols.py
    - DELETE_FIELD sentinel in update change-sets removes a key instead of setting it
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import delete, select

from docmapper.core.domain_types import DocumentId, NativeOperator
from docmapper.core.errors import (
    ErrorContext, InvalidFilterError, StoreCommitError, StoreNotConnectedError,
)
from docmapper.core.store_protocols import DELETE_FIELD, DOCUMENT_ID
from docmapper.infrastructure.database import DatabaseSessionManager
from docmapper.infrastructure.predicates import Predicate, matches_all
from docmapper.models.document_record import DocumentRecord, new_document_id

logger = logging.getLogger(__name__)

_LIST_OPERATORS = (
    NativeOperator.IN, NativeOperator.NOT_IN, NativeOperator.ARRAY_CONTAINS_ANY,
)


def merge_changes(data: dict, changes: dict) -> dict:
    """Shallow top-level merge; DELETE_FIELD values remove their key."""
    merged = dict(data)
    for key, value in changes.items():
        if value is DELETE_FIELD:
            merged.pop(key, None)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


@dataclass(frozen=True)
class DocumentSnapshot:
    """Point-in-time read of one document."""
    id: DocumentId
    reference: "DocumentReference"
    data: dict = field(repr=False)

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self.data)


class DocumentReference:
    """Address of one document within a collection."""

    def __init__(self, store: "SqlDocumentStore", collection: str, document_id: str):
        self._store = store
        self.collection = collection
        self.id = DocumentId(document_id)

    def __repr__(self) -> str:
        return f"DocumentReference({self.collection}/{self.id})"

    def _context(self, operation: str) -> ErrorContext:
        return ErrorContext(
            collection=self.collection, operation=operation, document_id=self.id,
        )

    def _row_query(self):
        return select(DocumentRecord).where(
            DocumentRecord.collection == self.collection,
            DocumentRecord.id == self.id,
        )

    async def get(self) -> DocumentSnapshot | None:
        async with self._store.manager.session("get", context=self._context("get")) as db:
            row = (await db.execute(self._row_query())).scalar_one_or_none()
        if row is None:
            return None
        return DocumentSnapshot(id=DocumentId(row.id), reference=self, data=row.data)

    async def set(self, data: dict[str, Any]) -> None:
        """Full replace; creates the document under this id if absent."""
        async with self._store.manager.session(
            "set", write=True, context=self._context("set"),
        ) as db:
            row = (await db.execute(self._row_query())).scalar_one_or_none()
            if row is None:
                db.add(DocumentRecord(
                    id=self.id, collection=self.collection, data=copy.deepcopy(data),
                ))
            else:
                row.data = copy.deepcopy(data)

    async def delete(self) -> int:
        """Delete this document. Returns rows removed (0 when it did not exist)."""
        async with self._store.manager.session(
            "delete", write=True, context=self._context("delete"),
        ) as db:
            result = await db.execute(
                delete(DocumentRecord).where(
                    DocumentRecord.collection == self.collection,
                    DocumentRecord.id == self.id,
                )
            )
            deleted = result.rowcount or 0
        return deleted


class Query:
    """Immutable filtered view of one collection."""

    def __init__(
        self,
        store: "SqlDocumentStore",
        collection: str,
        predicates: tuple[Predicate, ...] = (),
        limit_count: int | None = None,
    ):
        self._store = store
        self.collection = collection
        self.predicates = predicates
        self.limit_count = limit_count

    def where(self, path: str, op: NativeOperator | str, value: Any) -> "Query":
        native = NativeOperator(op)
        if native in _LIST_OPERATORS and not isinstance(value, (list, tuple)):
            raise InvalidFilterError(
                f"Operator '{native.value}' on '{path}' requires a list value", path,
            )
        predicate = Predicate(path, native, value)
        return Query(
            self._store, self.collection, self.predicates + (predicate,), self.limit_count,
        )

    def limit(self, count: int) -> "Query":
        return Query(self._store, self.collection, self.predicates, count)

    def _statement(self):
        stmt = (
            select(DocumentRecord)
            .where(DocumentRecord.collection == self.collection)
            .order_by(DocumentRecord.created_at, DocumentRecord.id)
        )
        for p in self.predicates:
            if p.path != DOCUMENT_ID:
                continue
            if p.op == NativeOperator.EQUAL and isinstance(p.value, str):
                stmt = stmt.where(DocumentRecord.id == p.value)
            elif p.op == NativeOperator.IN and all(isinstance(v, str) for v in p.value):
                stmt = stmt.where(DocumentRecord.id.in_(list(p.value)))
        return stmt

    async def get(self) -> list[DocumentSnapshot]:
        """Execute the query. Read failures surface as StoreError."""
        if self.limit_count is not None and self.limit_count <= 0:
            return []
        context = ErrorContext(collection=self.collection, operation="query")
        async with self._store.manager.session("query", context=context) as db:
            rows = (await db.execute(self._statement())).scalars().all()

        snapshots: list[DocumentSnapshot] = []
        for row in rows:
            if not matches_all(row.id, row.data, self.predicates):
                continue
            reference = DocumentReference(self._store, self.collection, row.id)
            snapshots.append(
                DocumentSnapshot(id=DocumentId(row.id), reference=reference, data=row.data),
            )
            if self.limit_count is not None and len(snapshots) >= self.limit_count:
                break
        return snapshots


class CollectionReference(Query):
    """Unfiltered query over a collection plus its write entry points."""

    def __init__(self, store: "SqlDocumentStore", name: str):
        super().__init__(store, name)
        self.name = name

    def __repr__(self) -> str:
        return f"CollectionReference({self.name})"

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._store, self.name, document_id)

    async def insert(self, data: dict[str, Any]) -> DocumentId:
        """Insert a new document under a fresh identifier."""
        document_id = new_document_id()
        context = ErrorContext(
            collection=self.name, operation="insert", document_id=document_id,
        )
        async with self._store.manager.session("insert", write=True, context=context) as db:
            db.add(DocumentRecord(
                id=document_id, collection=self.name, data=copy.deepcopy(data),
            ))
        logger.debug(
            "Inserted document",
            extra={"collection": self.name, "document_id": document_id},
        )
        return DocumentId(document_id)


class WriteBatch:
    """Accumulates deletes and updates, then commits them atomically."""

    def __init__(self, store: "SqlDocumentStore"):
        self._store = store
        self._writes: list[tuple[str, DocumentReference, dict | None]] = []
        self._committed = False

    def __len__(self) -> int:
        return len(self._writes)

    def delete(self, reference: DocumentReference) -> "WriteBatch":
        self._writes.append(("delete", reference, None))
        return self

    def update(self, reference: DocumentReference, changes: dict[str, Any]) -> "WriteBatch":
        self._writes.append(("update", reference, dict(changes)))
        return self

    async def commit(self) -> None:
        if self._committed:
            raise StoreCommitError("Batch already committed", "batch_commit")
        self._committed = True
        async with self._store.manager.session("batch_commit", write=True) as db:
            for kind, reference, changes in self._writes:
                if kind == "delete":
                    await db.execute(
                        delete(DocumentRecord).where(
                            DocumentRecord.collection == reference.collection,
                            DocumentRecord.id == reference.id,
                        )
                    )
                    continue
                row = (await db.execute(reference._row_query())).scalar_one_or_none()
                if row is None:
                    raise StoreCommitError(
                        f"No document to update at {reference.collection}/{reference.id}",
                        "batch_commit",
                        ErrorContext(
                            collection=reference.collection,
                            operation="batch_commit",
                            document_id=reference.id,
                            debug_info={"pending_writes": len(self)},
                        ),
                    )
                row.data = merge_changes(row.data, changes)


class SqlDocumentStore:
    """Store handle: collections and batches over one DatabaseSessionManager."""

    def __init__(self, manager: DatabaseSessionManager):
        self.manager = manager

    @classmethod
    def from_url(
        cls, database_url: str, pool_size: int = 20, max_overflow: int = 10,
        echo: bool = False,
    ) -> "SqlDocumentStore":
        return cls(DatabaseSessionManager(database_url, pool_size, max_overflow, echo))

    def collection(self, name: str) -> CollectionReference:
        return CollectionReference(self, name)

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    async def create_schema(self) -> None:
        await self.manager.create_schema()

    async def health_check(self) -> bool:
        return await self.manager.health_check()

    async def dispose(self) -> None:
        await self.manager.dispose()


# Singleton (initialized by docmapper.lifecycle.connect)
document_store: SqlDocumentStore | None = None


def init_store(database_url: str, **kwargs) -> SqlDocumentStore:
    global document_store
    document_store = SqlDocumentStore.from_url(database_url, **kwargs)
    return document_store


def get_store() -> SqlDocumentStore:
    """Shared store handle. Raises StoreNotConnectedError before connect()."""
    if document_store is None:
        raise StoreNotConnectedError()
    return document_store


async def close_store() -> None:
    global document_store
    if document_store is not None:
        await document_store.dispose()
    document_store = None
