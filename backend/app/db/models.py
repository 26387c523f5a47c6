"""SQLAlchemy ORM models for documents, versions and share tokens."""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# JSONB on Postgres, plain JSON elsewhere (sqlite in tests)
JsonDocument = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class FlexDoc(Base):
    """Editor document table - owner-scoped, content stored as editor JSON."""

    __tablename__ = "flex_doc"
    __table_args__ = (Index("idx_flex_doc_owner", "owner_id", "updated_at"),)

    doc_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content: Mapped[dict[str, Any]] = mapped_column(JsonDocument, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    # Relationships
    versions: Mapped[list["DocVersion"]] = relationship(
        "DocVersion", back_populates="doc", cascade="all, delete-orphan"
    )
    shares: Mapped[list["Share"]] = relationship(
        "Share", back_populates="doc", cascade="all, delete-orphan"
    )


class DocVersion(Base):
    """Published version table - append-only compiled snapshots."""

    __tablename__ = "doc_version"
    __table_args__ = (UniqueConstraint("doc_id", "version_no", name="uq_doc_version_no"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    doc_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("flex_doc.doc_id", ondelete="CASCADE"), nullable=False
    )
    version_no: Mapped[int] = mapped_column(Integer, nullable=False)
    flex_json: Mapped[dict[str, Any]] = mapped_column(JsonDocument, nullable=False)
    validation_report: Mapped[dict[str, Any]] = mapped_column(JsonDocument, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    # Relationships
    doc: Mapped["FlexDoc"] = relationship("FlexDoc", back_populates="versions")


class Share(Base):
    """Share token table - at most one active token per document."""

    __tablename__ = "share"
    __table_args__ = (
        Index(
            "uq_share_active_doc",
            "doc_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    token: Mapped[str] = mapped_column(Text, primary_key=True)
    doc_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("flex_doc.doc_id", ondelete="CASCADE"), nullable=False
    )
    version_no: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    # Relationships
    doc: Mapped["FlexDoc"] = relationship("FlexDoc", back_populates="shares")
