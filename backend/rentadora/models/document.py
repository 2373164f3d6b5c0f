"""
Rentadora API - Document SQLAlchemy Model
==========================================

What:  ORM model for the `documents` table, the single table behind every
       collection when DOCUMENT_STORE=sql.
How:   One row per document. `collection` + `id` form the primary key and
       `data` holds the schemaless field mapping as JSON (JSONB on PostgreSQL).
Who:   Used by SQLDocumentStore and by Alembic.

Table Design:
    - collection: name of the collection ("usuarios", "maquinas", ...)
    - id: store-assigned identifier, unique within its collection
    - data: field name → value mapping, exactly as submitted
    - created_at / updated_at: bookkeeping only, never exposed in the API
"""

from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import JSON, DateTime, Index, String, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from rentadora.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(Base):
    """
    A stored document of any collection.

    Lifecycle:
        1. Inserted by POST with a fresh id (SQLDocumentStore.insert)
        2. `data` merged by PUT (SQLDocumentStore.merge_update)
        3. Row deleted by DELETE; no soft-delete
    """

    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="Collection the document belongs to",
    )

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="Store-assigned identifier, unique within the collection",
    )

    # JSON on SQLite, JSONB on PostgreSQL
    data: Mapped[Dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
        comment="Document fields as submitted by the client",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_documents_collection", "collection"),
    )

    def __repr__(self) -> str:
        return f"<Document(collection='{self.collection}', id='{self.id}')>"
