"""Typing game controller.

Wires the session state machine to passage selection, metrics, the save
cooldown and the leaderboard/history writers.

Round flow:
1. next_passage() picks a passage for the current filters and sets it as target
2. start() runs the countdown
3. handle(event) feeds key/input/IME events; on completion the record is
   built, saved (unless suppressed), and the next passage is set

Failures never escape as crashes: preconditions raise PreconditionError
before mutating anything, and write/read failures come back as notices.
"""

import asyncio
import time
from collections.abc import Callable
from enum import StrEnum
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict

from typing_arena.config.settings import Settings
from typing_arena.corpus.models import Passage
from typing_arena.db.document_store import DocumentStore
from typing_arena.errors import CorpusLoadError, IdentityNotReadyError, PreconditionError, ReadError
from typing_arena.game.context import GameContext
from typing_arena.game.cooldown import SaveCooldown
from typing_arena.game.identity import ActorIdentity
from typing_arena.history.analytics import HistorySummary, summarize_history
from typing_arena.history.service import HistoryEntry, HistoryService
from typing_arena.leaderboard.addressing import Scope
from typing_arena.leaderboard.service import BoardView, LeaderboardService, PartitionWriteResult
from typing_arena.metrics.record import PerformanceRecord, build_performance_record
from typing_arena.selection.filters import FilterContext
from typing_arena.session.events import SessionEvent
from typing_arena.session.scheduler import Scheduler
from typing_arena.session.state_machine import CompletionMeasurement, SessionStateMachine, SessionView

CORPUS_UNAVAILABLE_MESSAGE = "Passages could not be loaded. Input is disabled."


class NoticeLevel(StrEnum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notice(BaseModel):
    """A short message for the participant."""

    model_config = ConfigDict(frozen=True)

    level: NoticeLevel
    message: str


class SaveOutcome(BaseModel):
    """What happened to one completed round.

    The record is always present, so metrics stay visible even when nothing
    could be persisted.
    """

    record: PerformanceRecord
    suppressed: bool = False
    board_results: list[PartitionWriteResult] = []
    history_result: PartitionWriteResult | None = None
    notice: Notice | None = None

    @property
    def results(self) -> list[PartitionWriteResult]:
        extra = [self.history_result] if self.history_result is not None else []
        return [*self.board_results, *extra]

    @property
    def saved(self) -> bool:
        return any(r.ok for r in self.results)

    @property
    def failed(self) -> list[PartitionWriteResult]:
        return [r for r in self.results if not r.ok]


class TypingGame:
    def __init__(
        self,
        context: GameContext | None,
        store: DocumentStore,
        scheduler: Scheduler,
        identity: ActorIdentity | None = None,
        participant_name: str = "",
        clock: Callable[[], float] = time.monotonic,
        countdown_start: int = 3,
        countdown_interval: float = 0.7,
        save_cooldown_seconds: float = 15.0,
        leaderboard_limit: int = 10,
        history_fetch_limit: int = 300,
        on_change: Callable[[SessionView], None] | None = None,
        load_error: str | None = None,
    ):
        self.context = context
        self.identity = identity or ActorIdentity()
        self.participant_name = participant_name.strip()
        self.filters = FilterContext()
        self.leaderboard = LeaderboardService(store, limit=leaderboard_limit)
        self.history = HistoryService(store, fetch_limit=history_fetch_limit)
        self.cooldown = SaveCooldown(save_cooldown_seconds, clock=clock)
        self.machine = SessionStateMachine(
            scheduler,
            clock=clock,
            countdown_start=countdown_start,
            countdown_interval=countdown_interval,
            on_request_passage=self._advance,
            on_change=on_change,
        )
        self.current_passage: Passage | None = None
        self.last_outcome: SaveOutcome | None = None
        self.notice: Notice | None = None
        if context is None:
            self.notice = Notice(level=NoticeLevel.ERROR, message=load_error or CORPUS_UNAVAILABLE_MESSAGE)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: DocumentStore,
        scheduler: Scheduler,
        identity: ActorIdentity | None = None,
        **kwargs: Any,
    ) -> "TypingGame":
        """Build a game from settings, loading the configured corpus.

        A corpus that fails to load does not raise: the game comes up with
        input disabled and an error notice.
        """
        context: GameContext | None = None
        load_error: str | None = None
        try:
            context = GameContext.from_corpus_file(settings.corpus_path, recent_pool_size=settings.recent_pool_size)
        except CorpusLoadError as e:
            logger.error(f"[GAME] {e}")
            load_error = f"{CORPUS_UNAVAILABLE_MESSAGE} ({e})"

        return cls(
            context,
            store,
            scheduler,
            identity=identity,
            participant_name=kwargs.pop("participant_name", settings.participant_name),
            countdown_start=settings.countdown_start,
            countdown_interval=settings.countdown_interval_seconds,
            save_cooldown_seconds=settings.save_cooldown_seconds,
            leaderboard_limit=settings.leaderboard_limit,
            history_fetch_limit=settings.history_fetch_limit,
            load_error=load_error,
            **kwargs,
        )

    # -----------------------
    # state
    # -----------------------
    @property
    def view(self) -> SessionView:
        return self.machine.view

    @property
    def ready(self) -> bool:
        return self.context is not None

    def _require_context(self) -> GameContext:
        if self.context is None:
            raise PreconditionError(self.notice.message if self.notice else CORPUS_UNAVAILABLE_MESSAGE)
        return self.context

    # -----------------------
    # filters and passages
    # -----------------------
    def set_filters(self, **changes: Any) -> Passage:
        """Update filter dimensions and serve a passage matching them."""
        context = self._require_context()
        updated = self.filters.model_copy(update={})
        for field, value in changes.items():
            setattr(updated, field, value)
        self.filters = context.resolve_filters(updated)
        logger.info(f"[GAME] Filters changed: {self.filters.model_dump()}")
        return self.next_passage()

    def next_passage(self) -> Passage:
        """Pick a passage for the current filters and make it the round target.

        Raises:
            PreconditionError: If no corpus is loaded
        """
        context = self._require_context()
        self.filters = context.resolve_filters(self.filters)
        passage = context.pick(self.filters)
        if passage is None:
            raise PreconditionError("No passage available")
        self.current_passage = passage
        self.machine.set_target(passage)
        return passage

    def _advance(self) -> None:
        try:
            self.next_passage()
        except PreconditionError as e:
            self.notice = Notice(level=NoticeLevel.ERROR, message=str(e))

    # -----------------------
    # round control
    # -----------------------
    def start(self) -> None:
        """Start the countdown for the current target.

        Raises:
            PreconditionError: If there is no participant or no target
        """
        self._require_context()
        if not self.participant_name:
            raise PreconditionError("Choose a participant name before starting")
        if self.current_passage is None:
            raise PreconditionError("No passage loaded")
        self.machine.start_countdown()

    def skip(self) -> None:
        """Abandon the round without recording anything and serve a new passage."""
        self._require_context()
        self.machine.skip()

    async def handle(self, event: SessionEvent) -> SaveOutcome | None:
        """Feed one input event; returns the save outcome if it completed the round."""
        measurement = self.machine.dispatch(event)
        if measurement is None:
            return None
        return await self._finish(measurement)

    async def _finish(self, measurement: CompletionMeasurement) -> SaveOutcome:
        context = self._require_context()
        passage = self.machine.target
        record = build_performance_record(
            measurement,
            passage,
            context.resolve_filters(self.filters),
            played_on=context.today(),
        )
        logger.info(
            f"[GAME] Round result: rank={record.rank} cpm={record.cpm} kpm={record.kpm} "
            f"eff={record.eff:.3f} score={record.ranking_score}"
        )
        outcome = await self.save(record)
        self.last_outcome = outcome
        self.notice = outcome.notice
        self._advance()
        return outcome

    # -----------------------
    # persistence
    # -----------------------
    async def save(self, record: PerformanceRecord) -> SaveOutcome:
        """Persist a record to its boards and to history.

        Suppressed within the cooldown window. All writes are independent;
        partial failure is reported in one notice and never raised.
        """
        name = self.participant_name
        if not name:
            return SaveOutcome(
                record=record,
                notice=Notice(level=NoticeLevel.WARNING, message="No participant selected; score not saved"),
            )

        if not self.cooldown.allows(name):
            remaining = self.cooldown.remaining(name)
            logger.info(f"[GAME] Save suppressed by cooldown ({remaining:.1f}s left)")
            return SaveOutcome(
                record=record,
                suppressed=True,
                notice=Notice(level=NoticeLevel.INFO, message=f"Finished too soon after the last saved round; not saved ({remaining:.0f}s cooldown)"),
            )

        try:
            actor_id = self.identity.require()
        except IdentityNotReadyError as e:
            logger.warning(f"[GAME] {e}")
            return SaveOutcome(record=record, notice=Notice(level=NoticeLevel.ERROR, message=f"Save failed: {e}"))

        board_results, history_result = await asyncio.gather(
            self.leaderboard.save_to_boards(record, name=name, actor_id=actor_id),
            self.history.append(record, name=name, actor_id=actor_id),
        )
        outcome = SaveOutcome(record=record, board_results=board_results, history_result=history_result)

        if outcome.saved:
            self.cooldown.mark_saved(name)
        if outcome.failed:
            total = len(outcome.results)
            outcome.notice = Notice(
                level=NoticeLevel.ERROR,
                message=f"Save failed for {len(outcome.failed)} of {total} destinations",
            )
        else:
            outcome.notice = Notice(level=NoticeLevel.INFO, message=f"Saved: {record.rank} / score {record.ranking_score}")
        return outcome

    # -----------------------
    # reads
    # -----------------------
    def load_boards(self) -> dict[Scope, BoardView]:
        context = self._require_context()
        return self.leaderboard.load_boards(context.resolve_filters(self.filters), context.today())

    def load_history(self, limit: int | None = None) -> tuple[list[HistoryEntry], HistorySummary, Notice | None]:
        """Recent history and its summary; a failed read yields an empty summary and a notice."""
        actor_id = self.identity.actor_id
        if actor_id is None:
            notice = Notice(level=NoticeLevel.WARNING, message="Identity not established yet; no history to show")
            return [], summarize_history([]), notice
        try:
            entries = self.history.recent(actor_id, limit=limit)
        except ReadError as e:
            logger.warning(f"[GAME] {e}")
            return [], summarize_history([]), Notice(level=NoticeLevel.ERROR, message=str(e))
        return entries, summarize_history(entries), None
