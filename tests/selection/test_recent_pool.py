import pytest

from typing_arena.corpus.tagging import tag_passage
from typing_arena.selection.recent_pool import RecentPool


def test_remember_is_most_recent_first_and_bounded():
    pool = RecentPool(max_size=3)
    for text in ("a", "b", "c", "d"):
        pool.remember(text)
    assert pool.entries == ["d", "c", "b"]
    assert "a" not in pool
    assert len(pool) == 3


def test_remember_moves_existing_text_to_front():
    pool = RecentPool(max_size=3, initial=["c", "b", "a"])
    pool.remember("a")
    assert pool.entries == ["a", "c", "b"]


def test_exclude_skips_recent_texts():
    passages = [tag_passage(t) for t in ("あ", "い", "う")]
    pool = RecentPool(initial=["あ", "い"])
    assert [p.text for p in pool.exclude(passages)] == ["う"]


def test_exclude_falls_back_when_everything_is_recent():
    passages = [tag_passage(t) for t in ("あ", "い")]
    pool = RecentPool(initial=["あ", "い"])
    assert pool.exclude(passages) == passages


def test_clear():
    pool = RecentPool(initial=["あ"])
    pool.clear()
    assert len(pool) == 0


def test_size_must_be_positive():
    with pytest.raises(ValueError):
        RecentPool(max_size=0)
