"""Partitioned document store on top of SQLAlchemy.

A partition is a named bucket of JSON documents. The store supports the
three operations the rest of the package needs:

- append a document (store-assigned id and creation timestamp)
- ordered query with a limit
- transactional create-if-absent under a caller-chosen id
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from typing_arena.db.models import Document
from typing_arena.db.session import get_session

SessionFactory = Callable[[], AbstractContextManager[Session]]

# Fields that can be used for ordering, mapped to their indexed columns
ORDERABLE_FIELDS = {
    "ranking_score": Document.ranking_score,
    "cpm": Document.cpm,
    "created_at": Document.created_at,
}


class StoredDocument(BaseModel):
    """A document read back from the store."""

    model_config = ConfigDict(frozen=True)

    partition: str
    id: str
    data: dict[str, Any]
    created_at: datetime


def _to_stored(row: Document) -> StoredDocument:
    return StoredDocument(
        partition=row.partition,
        id=row.id,
        data=dict(row.payload),
        created_at=row.created_at,
    )


def _build_row(partition: str, doc_id: str, payload: dict[str, Any]) -> Document:
    ranking_score = payload.get("ranking_score")
    cpm = payload.get("cpm")
    return Document(
        partition=partition,
        id=doc_id,
        payload=payload,
        ranking_score=float(ranking_score) if ranking_score is not None else None,
        cpm=int(cpm) if cpm is not None else None,
    )


class DocumentStore:
    """Document store addressed by partition name and document id."""

    def __init__(self, session_factory: SessionFactory = get_session):
        self._session_factory = session_factory

    def add(self, partition: str, payload: dict[str, Any]) -> str:
        """Append a document under a fresh id.

        Returns:
            The store-assigned document id
        """
        if not partition:
            raise ValueError("partition must not be empty")
        doc_id = uuid.uuid4().hex
        with self._session_factory() as db:
            db.add(_build_row(partition, doc_id, payload))
        logger.debug(f"[STORE] Added document {doc_id} to {partition}")
        return doc_id

    def create_if_absent(self, partition: str, doc_id: str, payload: dict[str, Any]) -> bool:
        """Create a document under a caller-chosen id unless one already exists.

        Check and insert run in one transaction; a concurrent insert that wins
        the race surfaces as an IntegrityError and is reported as "not created".

        Returns:
            True if the document was created, False if the id was taken
        """
        if not partition or not doc_id:
            raise ValueError("partition and doc_id must not be empty")
        try:
            with self._session_factory() as db:
                if db.get(Document, (partition, doc_id)) is not None:
                    logger.debug(f"[STORE] {partition}/{doc_id} already exists")
                    return False
                db.add(_build_row(partition, doc_id, payload))
                db.flush()
        except IntegrityError:
            logger.info(f"[STORE] Lost create race for {partition}/{doc_id}")
            return False
        return True

    def get(self, partition: str, doc_id: str) -> StoredDocument | None:
        with self._session_factory() as db:
            row = db.get(Document, (partition, doc_id))
            return _to_stored(row) if row is not None else None

    def query(
        self,
        partition: str,
        order_by: Sequence[tuple[str, bool]],
        limit: int,
    ) -> list[StoredDocument]:
        """Read documents of one partition in the given order.

        Args:
            partition: Partition name
            order_by: (field, descending) pairs, applied in order
            limit: Maximum number of rows

        Raises:
            ValueError: If an order field is not orderable or limit is not positive
        """
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        stmt = select(Document).where(Document.partition == partition)
        for field, descending in order_by:
            column = ORDERABLE_FIELDS.get(field)
            if column is None:
                raise ValueError(f"Unknown order field: {field}. Valid fields: {list(ORDERABLE_FIELDS)}")
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        stmt = stmt.limit(limit)

        with self._session_factory() as db:
            rows = db.execute(stmt).scalars().all()
            return [_to_stored(row) for row in rows]
