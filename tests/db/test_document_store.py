"""Tests for the partitioned document store."""

import pytest
from sqlalchemy import select

from typing_arena.db.models import Document


def test_add_assigns_id_and_timestamp(store):
    doc_id = store.add("rankings__overall__diff_all", {"name": "p", "ranking_score": 382, "cpm": 300})
    doc = store.get("rankings__overall__diff_all", doc_id)

    assert doc.id == doc_id
    assert doc.data == {"name": "p", "ranking_score": 382, "cpm": 300}
    assert doc.created_at is not None


def test_partitions_are_isolated(store):
    store.add("a", {"cpm": 1})
    store.add("b", {"cpm": 2})
    docs = store.query("a", order_by=(("cpm", True),), limit=10)
    assert [d.data["cpm"] for d in docs] == [1]
    assert all(d.partition == "a" for d in docs)


def test_query_orders_and_limits(store):
    for score, cpm in ((100, 10), (300, 30), (300, 40), (200, 20)):
        store.add("p", {"ranking_score": score, "cpm": cpm})

    docs = store.query("p", order_by=(("ranking_score", True), ("cpm", True)), limit=3)
    assert [(d.data["ranking_score"], d.data["cpm"]) for d in docs] == [(300, 40), (300, 30), (200, 20)]

    ascending = store.query("p", order_by=(("cpm", False),), limit=2)
    assert [d.data["cpm"] for d in ascending] == [10, 20]


def test_query_rejects_unknown_field_and_bad_limit(store):
    with pytest.raises(ValueError):
        store.query("p", order_by=(("name", True),), limit=10)
    with pytest.raises(ValueError):
        store.query("p", order_by=(), limit=0)


def test_add_requires_partition(store):
    with pytest.raises(ValueError):
        store.add("", {"cpm": 1})


def test_get_missing_document(store):
    assert store.get("p", "nope") is None


def test_create_if_absent(store):
    assert store.create_if_absent("profiles", "actor-1", {"name": "first"}) is True
    assert store.create_if_absent("profiles", "actor-1", {"name": "second"}) is False
    assert store.get("profiles", "actor-1").data == {"name": "first"}


def test_same_id_allowed_in_different_partitions(store):
    assert store.create_if_absent("p1", "x", {}) is True
    assert store.create_if_absent("p2", "x", {}) is True


def test_payload_without_score_columns(store, session_factory):
    doc_id = store.add("history__a", {"note": "no metrics"})
    with session_factory() as db:
        row = db.execute(select(Document).where(Document.id == doc_id)).scalar_one()
        assert row.ranking_score is None
        assert row.cpm is None


def test_failed_transaction_rolls_back(session_factory):
    with pytest.raises(RuntimeError):
        with session_factory() as db:
            db.add(Document(partition="p", id="x", payload={}))
            db.flush()
            raise RuntimeError("boom")

    with session_factory() as db:
        assert db.get(Document, ("p", "x")) is None
