"""Boundary Protocols — contracts between the mapping core and the document store.

Invariants:
    - Core NEVER imports a store implementation — dependency arrows point inward only
    - Queries are immutable: where()/limit() return a new query
    - A WriteBatch applies all of its writes or none of them
    - DOCUMENT_ID is the path that addresses a document's identifier in where()

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: boundary methods are async because implementations do IO,
      while the translation that builds queries stays synchronous and pure
"""

from typing import Any, Protocol

from docmapper.core.domain_types import DocumentId, NativeOperator

# Same reserved name Firestore uses for its document-id field path
DOCUMENT_ID = "__name__"


class _DeleteField:
    def __repr__(self) -> str:
        return "DELETE_FIELD"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


# Value in an update change-set that removes the key instead of setting it
DELETE_FIELD: Any = _DeleteField()


class DocumentSnapshotLike(Protocol):
    """One stored document as read from the store."""
    id: DocumentId
    reference: "DocumentReferenceLike"

    def to_dict(self) -> dict[str, Any]: ...


class DocumentReferenceLike(Protocol):
    """Address of a single document."""
    id: DocumentId

    async def set(self, data: dict[str, Any]) -> None: ...
    async def get(self) -> DocumentSnapshotLike | None: ...
    async def delete(self) -> int: ...


class QueryLike(Protocol):
    """Composable read query over one collection."""
    def where(self, path: str, op: NativeOperator, value: Any) -> "QueryLike": ...
    def limit(self, count: int) -> "QueryLike": ...
    async def get(self) -> list[DocumentSnapshotLike]: ...


class CollectionLike(QueryLike, Protocol):
    """Collection handle: an unfiltered query plus write entry points."""
    name: str

    async def insert(self, data: dict[str, Any]) -> DocumentId: ...
    def document(self, document_id: str) -> DocumentReferenceLike: ...


class WriteBatchLike(Protocol):
    """Atomic multi-write unit."""
    def delete(self, reference: DocumentReferenceLike) -> "WriteBatchLike": ...
    def update(
        self, reference: DocumentReferenceLike, changes: dict[str, Any],
    ) -> "WriteBatchLike": ...
    async def commit(self) -> None: ...


class DocumentStore(Protocol):
    """Session-level store handle shared by every Model."""
    def collection(self, name: str) -> CollectionLike: ...
    def batch(self) -> WriteBatchLike: ...
