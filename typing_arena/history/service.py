"""Per-participant append-only play history."""

from datetime import datetime

from loguru import logger
from pydantic import BaseModel, ConfigDict

from typing_arena.db.document_store import DocumentStore, StoredDocument
from typing_arena.errors import ReadError
from typing_arena.leaderboard.addressing import history_partition
from typing_arena.leaderboard.service import PartitionWriteResult, write_document
from typing_arena.metrics.record import PerformanceRecord

DEFAULT_HISTORY_FETCH_LIMIT = 300


class HistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    cpm: int
    kpm: int
    wpm: int
    diff: int
    eff: float
    rank: str
    grade: str = ""
    ranking_score: int
    seconds: float
    item_difficulty: str = ""
    item_category: str = ""
    item_theme: str = ""
    created_at: datetime


def _to_entry(doc: StoredDocument) -> HistoryEntry:
    return HistoryEntry.model_validate({**doc.data, "id": doc.id, "created_at": doc.created_at})


class HistoryService:
    def __init__(self, store: DocumentStore, fetch_limit: int = DEFAULT_HISTORY_FETCH_LIMIT):
        self.store = store
        self.fetch_limit = fetch_limit

    async def append(self, record: PerformanceRecord, name: str, actor_id: str) -> PartitionWriteResult:
        partition = history_partition(actor_id)
        result = await write_document(self.store, partition, record.to_document(name=name, actor_id=actor_id))
        if result.ok:
            logger.info(f"[HISTORY] Appended round for actor {actor_id[:8]}")
        return result

    def recent(self, actor_id: str, limit: int | None = None) -> list[HistoryEntry]:
        """Newest-first history, capped at the fetch limit.

        Raises:
            ReadError: If the store query fails
        """
        capped = min(limit or self.fetch_limit, self.fetch_limit)
        partition = history_partition(actor_id)
        try:
            docs = self.store.query(partition, order_by=(("created_at", True),), limit=capped)
        except Exception as e:
            raise ReadError(f"Could not load history for {actor_id}: {e}") from e
        return [_to_entry(doc) for doc in docs]
