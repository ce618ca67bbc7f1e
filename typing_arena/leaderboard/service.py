"""Leaderboard reads and writes.

Writes: one PerformanceRecord fans out to every partition implied by its
frozen filter context. The writes are independent; each produces its own
PartitionWriteResult and a failing write never cancels the others.

Reads: top N of a partition by ranking score, ties broken by CPM.
A failed read degrades to an empty view carrying an error message.
"""

import asyncio
from datetime import date, datetime
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict

from typing_arena.db.document_store import DocumentStore, StoredDocument
from typing_arena.errors import ReadError
from typing_arena.leaderboard.addressing import ALL_SCOPES, Scope, partition_for_filters, write_scopes
from typing_arena.metrics.record import PerformanceRecord
from typing_arena.selection.filters import FilterContext

DEFAULT_LEADERBOARD_LIMIT = 10
LEADERBOARD_ORDER: tuple[tuple[str, bool], ...] = (("ranking_score", True), ("cpm", True))


class PartitionWriteResult(BaseModel):
    """Outcome of one independent write."""

    model_config = ConfigDict(frozen=True)

    partition: str
    scope: Scope | None = None
    ok: bool
    doc_id: str | None = None
    error: str | None = None


class BoardRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    ranking_score: int
    cpm: int
    kpm: int
    rank: str
    eff: float
    created_at: datetime


class BoardView(BaseModel):
    """One scope's leaderboard as shown to the participant."""

    scope: Scope
    partition: str
    rows: list[BoardRow] = []
    error: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.rows


def _to_row(doc: StoredDocument) -> BoardRow:
    data = doc.data
    return BoardRow(
        id=doc.id,
        name=str(data.get("name", "")),
        ranking_score=int(data.get("ranking_score", 0)),
        cpm=int(data.get("cpm", 0)),
        kpm=int(data.get("kpm", 0)),
        rank=str(data.get("rank", "")),
        eff=float(data.get("eff", 0.0)),
        created_at=doc.created_at,
    )


async def write_document(store: DocumentStore, partition: str, payload: dict[str, Any], scope: Scope | None = None) -> PartitionWriteResult:
    """Append one document, reporting failure as a result instead of raising."""
    try:
        doc_id = store.add(partition, payload)
    except Exception as e:
        logger.error(f"[LEADERBOARD] Write to {partition} failed: {type(e).__name__}: {e}")
        return PartitionWriteResult(partition=partition, scope=scope, ok=False, error=str(e) or type(e).__name__)
    return PartitionWriteResult(partition=partition, scope=scope, ok=True, doc_id=doc_id)


class LeaderboardService:
    def __init__(self, store: DocumentStore, limit: int = DEFAULT_LEADERBOARD_LIMIT):
        self.store = store
        self.limit = limit

    async def save_to_boards(self, record: PerformanceRecord, name: str, actor_id: str) -> list[PartitionWriteResult]:
        """Write the record to every board its filter context implies, concurrently."""
        filters = record.filter_context
        payload = record.to_document(name=name, actor_id=actor_id)
        targets = [(scope, partition_for_filters(scope, filters, record.played_on)) for scope in write_scopes(filters)]

        results = await asyncio.gather(
            *(write_document(self.store, partition, payload, scope) for scope, partition in targets)
        )
        ok = sum(1 for r in results if r.ok)
        logger.info(f"[LEADERBOARD] Saved score {record.ranking_score} to {ok}/{len(results)} boards")
        return list(results)

    def load_top(self, scope: Scope | str, filters: FilterContext, day: date) -> list[BoardRow]:
        """Top entries of one scope's board, best first.

        Raises:
            ReadError: If the store query fails
        """
        partition = partition_for_filters(scope, filters, day)
        try:
            docs = self.store.query(partition, order_by=LEADERBOARD_ORDER, limit=self.limit)
        except Exception as e:
            raise ReadError(f"Could not load leaderboard {partition}: {e}") from e
        return [_to_row(doc) for doc in docs]

    def load_boards(self, filters: FilterContext, day: date) -> dict[Scope, BoardView]:
        """All four scope views; each one fails independently."""
        views: dict[Scope, BoardView] = {}
        for scope in ALL_SCOPES:
            partition = partition_for_filters(scope, filters, day)
            try:
                views[scope] = BoardView(scope=scope, partition=partition, rows=self.load_top(scope, filters, day))
            except ReadError as e:
                logger.warning(f"[LEADERBOARD] {e}")
                views[scope] = BoardView(scope=scope, partition=partition, error=str(e))
        return views
