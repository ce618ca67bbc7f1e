from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Float, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""


class Document(Base):
    """A document stored under a named partition.

    The store is addressed by (partition, id). Leaderboards and per-actor
    histories are both partitions of this one table; a partition name is an
    opaque string built by the caller.

    Stores:
    - partition: Partition name (e.g. "rankings__overall__diff_all")
    - id: Document id, unique within its partition
    - payload: The document body as JSON
    - ranking_score, cpm: Copied out of the payload so partitions can be
      ordered by them in SQL
    - created_at: Store-assigned creation timestamp (UTC)
    """

    __tablename__ = "documents"

    partition: Mapped[str] = mapped_column(String(255), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)
    ranking_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    cpm: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_documents_partition_score", "partition", "ranking_score", "cpm"),
        Index("idx_documents_partition_created", "partition", "created_at"),
    )
