"""SQLAlchemy ORM models for the reference corpus.

The tables are written by the ingestion pipeline; this service only reads them.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class ReferenceDocument(Base):
    """Uploaded best-practice source document."""

    __tablename__ = "reference_document"

    document_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    plan_type_code: Mapped[str] = mapped_column(String(32), nullable=False)
    jurisdiction_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    grade_band: Mapped[str | None] = mapped_column(String(8), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    ingestion_status: Mapped[str] = mapped_column(String(16), default="PENDING", nullable=False)
    ingestion_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    chunks: Mapped[list["ReferenceChunk"]] = relationship(
        "ReferenceChunk", back_populates="document", cascade="all, delete-orphan"
    )


class ReferenceChunk(Base):
    """Tagged unit of best-practice example text."""

    __tablename__ = "reference_chunk"
    __table_args__ = (
        Index("idx_chunk_plan_section", "plan_type_code", "section_tag"),
        Index("idx_chunk_document", "document_id"),
    )

    chunk_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    document_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("reference_document.document_id", ondelete="CASCADE"), nullable=False
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    plan_type_code: Mapped[str] = mapped_column(String(32), nullable=False)
    section_tag: Mapped[str | None] = mapped_column(String(64), nullable=True)
    jurisdiction_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    grade_band: Mapped[str | None] = mapped_column(String(8), nullable=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    document: Mapped["ReferenceDocument"] = relationship(
        "ReferenceDocument", back_populates="chunks"
    )
