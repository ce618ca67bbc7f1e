"""Tests for per-participant history."""

from datetime import date

import pytest

from typing_arena.corpus.tagging import tag_passage
from typing_arena.db.document_store import DocumentStore
from typing_arena.errors import ReadError
from typing_arena.history.service import HistoryService
from typing_arena.metrics.record import build_performance_record
from typing_arena.selection.filters import FilterContext
from typing_arena.session.state_machine import CompletionMeasurement

PASSAGE = tag_passage("月は少しずつ遠ざかる。", category="科学", theme="宇宙")


def make_record(typed_length=300, seconds=60.0, keystrokes=330):
    measurement = CompletionMeasurement(typed_length=typed_length, elapsed_seconds=seconds, keystrokes=keystrokes)
    return build_performance_record(measurement, PASSAGE, FilterContext(), played_on=date(2024, 5, 17))


@pytest.mark.asyncio
async def test_append_and_read_back(store):
    service = HistoryService(store)
    result = await service.append(make_record(), name="tester", actor_id="actor-1")

    assert result.ok
    assert result.partition == "history__actor-1"

    entries = service.recent("actor-1")
    assert len(entries) == 1
    entry = entries[0]
    assert (entry.cpm, entry.kpm, entry.wpm, entry.diff) == (300, 330, 60, 30)
    assert entry.rank == "A"
    assert entry.ranking_score == 382
    assert entry.item_theme == "宇宙"
    assert entry.id == result.doc_id


@pytest.mark.asyncio
async def test_history_is_per_actor(store):
    service = HistoryService(store)
    await service.append(make_record(), name="a", actor_id="actor-a")
    await service.append(make_record(), name="b", actor_id="actor-b")
    await service.append(make_record(), name="b", actor_id="actor-b")

    assert len(service.recent("actor-a")) == 1
    assert len(service.recent("actor-b")) == 2
    assert service.recent("nobody") == []


@pytest.mark.asyncio
async def test_recent_is_newest_first_and_capped(store):
    service = HistoryService(store, fetch_limit=3)
    for typed_length in (100, 200, 300, 400, 500):
        await service.append(make_record(typed_length=typed_length), name="t", actor_id="actor-1")

    entries = service.recent("actor-1", limit=50)
    assert [e.cpm for e in entries] == [500, 400, 300]
    assert [e.cpm for e in service.recent("actor-1", limit=2)] == [500, 400]


def test_read_failure_raises_read_error(session_factory):
    class BrokenStore(DocumentStore):
        def query(self, partition, order_by, limit):
            raise RuntimeError("offline")

    with pytest.raises(ReadError):
        HistoryService(BrokenStore(session_factory)).recent("actor-1")
