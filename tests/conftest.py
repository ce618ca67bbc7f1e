"""Root conftest for all tests.

Shared fixtures: an in-memory SQLite document store, a manually advanced
scheduler, a small tagged corpus and a ready-to-play game.
"""

import random
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from typing_arena.corpus.tagging import tag_passage
from typing_arena.db.document_store import DocumentStore
from typing_arena.db.models import Base
from typing_arena.db.session import session_scope
from typing_arena.game.context import GameContext
from typing_arena.game.controller import TypingGame
from typing_arena.game.identity import ActorIdentity
from typing_arena.selection.recent_pool import RecentPool
from typing_arena.session.scheduler import ManualScheduler

FIXED_DAY = date(2024, 5, 17)


@pytest.fixture
def engine():
    """Isolated in-memory SQLite engine per test.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    return lambda: session_scope(session_local)


@pytest.fixture
def store(session_factory) -> DocumentStore:
    return DocumentStore(session_factory)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler(start=1000.0)


@pytest.fixture
def passages():
    return [
        tag_passage("海の生き物はふしぎだ。", category="生き物", theme="海"),
        tag_passage("タコの心臓は三つある。", category="生き物", theme="海"),
        tag_passage("月は少しずつ遠ざかる。", category="科学", theme="宇宙"),
        tag_passage("金星では太陽が西から昇る。", category="科学", theme="宇宙"),
        tag_passage("バナナはベリーの仲間だ。", category="食べ物", theme="森"),
        tag_passage("キリンの首の骨は七つ。", category="生き物", theme="草原"),
    ]


@pytest.fixture
def context(passages) -> GameContext:
    return GameContext(passages, recent=RecentPool(10), rng=random.Random(7), today=lambda: FIXED_DAY)


@pytest.fixture
def identity() -> ActorIdentity:
    return ActorIdentity("actor-0001")


@pytest.fixture
def game(context, store, scheduler, identity) -> TypingGame:
    game = TypingGame(
        context,
        store,
        scheduler,
        identity=identity,
        participant_name="tester",
        clock=scheduler.now,
    )
    game.next_passage()
    return game


@pytest.fixture
def run_countdown(scheduler):
    """Advance through a full countdown (3, 2, 1, 0 then active)."""

    def _run(ticks: int = 4, interval: float = 0.7) -> None:
        scheduler.advance(ticks * interval + 0.01)

    return _run
