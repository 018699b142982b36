"""ORM model backing the document collections.

Every collection lives in one ``documents`` table: a row per document keyed by
``(collection, doc_id)`` with the document body stored as JSON (JSONB on
PostgreSQL).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base

DocumentPayload = JSON().with_variant(JSONB(), "postgresql")


class Document(Base):
    """A single JSON document in a named collection.

    Attributes:
        id: Surrogate primary key (insertion order).
        collection: Collection name (``users``, ``tasks``, ...).
        doc_id: Document identifier, mirrored in ``payload["_id"]``.
        payload: Full document body.
        created_at: Row insertion time (store bookkeeping, not part of the payload).
    """

    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection: Mapped[str] = mapped_column(String(64), nullable=False)
    doc_id: Mapped[str] = mapped_column(String(64), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(DocumentPayload, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("collection", "doc_id", name="uq_documents_collection_doc_id"),
        Index("ix_documents_collection", "collection"),
    )

    def __repr__(self) -> str:
        return f"<Document {self.collection}/{self.doc_id}>"
