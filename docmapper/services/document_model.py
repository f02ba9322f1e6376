"""Document Model — schema-bound entity with async CRUD against the document store.

Invariants:
    - create() validates first; invalid input raises SchemaValidationError and writes nothing
    - An instance's id is None until its first save, then never changes
    - save() with an id fully replaces the stored document (last writer wins)
    - Reads (find, find_one) never catch store errors: they propagate unmodified
    - Deletes and batch updates never raise store errors: failures are logged and
      returned as acknowledged=False
    - StoreNotConnectedError always reaches the caller, for reads and writes alike
    - matched/deleted counts are the size of the snapshot read before the batch

Design Decisions:
    - Classmethods on a per-model subclass (built by ModelRegistry): the class is
      the collection, instances are documents
    - Store resolved per call through store_provider: models can be declared
      before connect() runs
    - Multi-document writes go through one WriteBatch, so they are all-or-nothing
"""

import logging
from typing import Any, Callable, ClassVar, Iterator, Mapping

from docmapper.core.domain_types import DocumentId
from docmapper.core.errors import ErrorContext, SchemaValidationError, StoreError
from docmapper.core.filter_expression import FilterInput
from docmapper.core.schema_types import Schema
from docmapper.core.store_protocols import (
    CollectionLike, DocumentSnapshotLike, DocumentStore, QueryLike,
)
from docmapper.core.translate_filter import describe_filter, translate_filter
from docmapper.core.update_expression import resolve_update
from docmapper.core.write_results import DeleteResult, UpdateResult
from docmapper.infrastructure.document_store import get_store

logger = logging.getLogger(__name__)

StoreProvider = Callable[[], DocumentStore]


class Model:
    """Base class for registered models. Subclasses set the ClassVars."""

    model_name: ClassVar[str] = "Model"
    collection_name: ClassVar[str] = "models"
    schema: ClassVar[Schema] = Schema({})
    store_provider: ClassVar[StoreProvider] = staticmethod(get_store)

    def __init__(
        self, data: Mapping[str, Any] | None = None, document_id: str | None = None,
    ):
        self.data: dict[str, Any] = dict(data or {})
        self._id: DocumentId | None = (
            DocumentId(document_id) if document_id is not None else None
        )

    @property
    def id(self) -> DocumentId | None:
        return self._id

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self._id!r} {self.data!r}>"

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.data[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """Identifier plus fields, the shape API layers return."""
        return {"id": self._id, **self.data}

    # ─── Store access ─────────────────────────────────────────────

    @classmethod
    def store(cls) -> DocumentStore:
        return cls.store_provider()

    @classmethod
    def collection(cls) -> CollectionLike:
        return cls.store().collection(cls.collection_name)

    @classmethod
    def query(cls, filter_input: FilterInput = None) -> QueryLike:
        """Native query for a filter (dict DSL or filter nodes)."""
        return translate_filter(cls.collection(), filter_input)

    @classmethod
    def _hydrate(cls, snapshot: DocumentSnapshotLike) -> "Model":
        return cls(snapshot.to_dict(), snapshot.id)

    def _log_extra(self, operation: str) -> dict:
        return {
            "collection": type(self).collection_name,
            "operation": operation,
            "document_id": self._id,
        }

    # ─── Create / save ────────────────────────────────────────────

    @classmethod
    async def create(cls, data: Mapping[str, Any]) -> "Model":
        """Validate, apply defaults, insert. Raises SchemaValidationError."""
        result = cls.schema.validate(data)
        if not result.valid:
            raise SchemaValidationError(
                result.errors,
                ErrorContext(collection=cls.collection_name, operation="create"),
            )
        instance = cls(result.validated_data)
        await instance.save()
        return instance

    async def save(self) -> "Model":
        """Insert on first save; afterwards overwrite the stored document."""
        collection = type(self).collection()
        if self._id is not None:
            await collection.document(self._id).set(self.data)
            logger.debug("Replaced document", extra=self._log_extra("save"))
        else:
            self._id = await collection.insert(self.data)
            logger.debug("Inserted document", extra=self._log_extra("save"))
        return self

    # ─── Reads ────────────────────────────────────────────────────

    @classmethod
    async def find_one(cls, filter_input: FilterInput = None) -> "Model | None":
        snapshots = await cls.query(filter_input).limit(1).get()
        if not snapshots:
            return None
        return cls._hydrate(snapshots[0])

    @classmethod
    async def find(cls, filter_input: FilterInput = None) -> list["Model"]:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"find {describe_filter(filter_input)}",
                extra={"collection": cls.collection_name, "operation": "find"},
            )
        snapshots = await cls.query(filter_input).get()
        return [cls._hydrate(s) for s in snapshots]

    # ─── Deletes ──────────────────────────────────────────────────

    @classmethod
    async def find_by_id_and_delete(cls, document_id: str) -> DeleteResult:
        """Delete one document by identifier. Store failures → acknowledged=False."""
        reference = cls.collection().document(document_id)
        try:
            deleted = await reference.delete()
        except StoreError as e:
            logger.error(
                f"Error deleting document: {e}",
                exc_info=True,
                extra={
                    "collection": cls.collection_name, "operation": "delete",
                    "document_id": document_id, "error_code": e.code,
                },
            )
            return DeleteResult(acknowledged=False, deleted_count=0)
        return DeleteResult(acknowledged=True, deleted_count=deleted)

    @classmethod
    async def delete_many(cls, filter_input: FilterInput = None) -> DeleteResult:
        """Delete every match in one batch. Count is the matched snapshot size."""
        snapshots = await cls.query(filter_input).get()
        if not snapshots:
            return DeleteResult(acknowledged=True, deleted_count=0)

        batch = cls.store().batch()
        for snapshot in snapshots:
            batch.delete(snapshot.reference)
        try:
            await batch.commit()
        except StoreError as e:
            logger.error(
                f"Error deleting documents in batch: {e}",
                exc_info=True,
                extra={
                    "collection": cls.collection_name, "operation": "delete_many",
                    "matched_count": len(snapshots), "error_code": e.code,
                },
            )
            return DeleteResult(acknowledged=False, deleted_count=0)
        return DeleteResult(acknowledged=True, deleted_count=len(snapshots))

    # ─── Updates ──────────────────────────────────────────────────

    @classmethod
    async def _update(
        cls, filter_input: FilterInput, update: Mapping[str, Any],
        limit: int | None, operation: str,
    ) -> UpdateResult:
        changes = resolve_update(update)
        query = cls.query(filter_input)
        if limit is not None:
            query = query.limit(limit)
        snapshots = await query.get()
        matched = len(snapshots)
        if not snapshots:
            return UpdateResult(acknowledged=True, modified_count=0, matched_count=0)

        batch = cls.store().batch()
        for snapshot in snapshots:
            batch.update(snapshot.reference, changes)
        try:
            await batch.commit()
        except StoreError as e:
            logger.error(
                f"Error updating documents in batch: {e}",
                exc_info=True,
                extra={
                    "collection": cls.collection_name, "operation": operation,
                    "matched_count": matched, "error_code": e.code,
                },
            )
            return UpdateResult(acknowledged=False, modified_count=0, matched_count=matched)
        return UpdateResult(acknowledged=True, modified_count=matched, matched_count=matched)

    @classmethod
    async def update_one(
        cls, filter_input: FilterInput, update: Mapping[str, Any],
    ) -> UpdateResult:
        """Shallow-merge update into the first match."""
        return await cls._update(filter_input, update, 1, "update_one")

    @classmethod
    async def update_many(
        cls, filter_input: FilterInput, update: Mapping[str, Any],
    ) -> UpdateResult:
        """Shallow-merge update into every match, atomically."""
        return await cls._update(filter_input, update, None, "update_many")
