"""Document Record ORM — one row per stored document, any collection.

Invariants:
    - id is a 32-char hex UUID assigned on insert, never reassigned
    - collection + id address a document; queries always filter by collection
    - data holds the full document body as JSON (schemaless at this layer)

Design Decisions:
    - Single table for all collections: collections are created implicitly on
      first insert, as in a document database
    - created_at drives result ordering, so reads are deterministic per store
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from docmapper.db.base import Base


def new_document_id() -> str:
    return uuid.uuid4().hex


class DocumentRecord(Base):
    """Stored document — body lives in the JSON data column."""
    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_collection_created", "collection", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_document_id,
    )
    collection: Mapped[str] = mapped_column(String(255), nullable=False)
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
