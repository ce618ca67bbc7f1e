"""Session state machine - one round of transcription.

States: idle -> countdown -> active -> completed | aborted

Rules:
- A round completes at most once; the completion measurement is emitted once
- Keystrokes count only while active, IME composition keystrokes included
- No judgment and no completion check while an IME composition is open
- The timer starts on the first non-empty input change, not on round start
- Starting while a countdown or round is running only focuses (no restart)
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from loguru import logger

from typing_arena.corpus.models import Passage
from typing_arena.session.events import SessionEvent, SessionEventType, is_counted_key
from typing_arena.session.judgment import Judgment, judge, unjudged
from typing_arena.session.scheduler import ScheduledCall, Scheduler

DEFAULT_COUNTDOWN_START = 3
DEFAULT_COUNTDOWN_INTERVAL_SECONDS = 0.7
MIN_ELAPSED_SECONDS = 0.001


class SessionState(StrEnum):
    IDLE = "idle"
    COUNTDOWN = "countdown"
    ACTIVE = "active"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class CompletionMeasurement:
    """Raw measurement handed to the metrics calculator."""

    typed_length: int
    elapsed_seconds: float
    keystrokes: int


@dataclass(frozen=True)
class SessionView:
    """What a front end needs to draw the round."""

    state: SessionState
    countdown_value: int | None
    input_enabled: bool
    composing: bool
    committed_value: str
    judgment: Judgment


class SessionStateMachine:
    """Owns the lifecycle of one round.

    All transitions go through dispatch(); the helper methods are thin
    wrappers that build the matching SessionEvent.

    Args:
        scheduler: Schedules countdown ticks
        clock: Monotonic time source in seconds
        countdown_start: First countdown value shown (counts down to 0)
        countdown_interval: Seconds between countdown values
        on_complete: Called once per completed round
        on_request_passage: Called when a skip needs a new passage
        on_change: Called with the new view after every dispatched event
    """

    def __init__(
        self,
        scheduler: Scheduler,
        clock: Callable[[], float] = time.monotonic,
        countdown_start: int = DEFAULT_COUNTDOWN_START,
        countdown_interval: float = DEFAULT_COUNTDOWN_INTERVAL_SECONDS,
        on_complete: Callable[[CompletionMeasurement], None] | None = None,
        on_request_passage: Callable[[], None] | None = None,
        on_change: Callable[[SessionView], None] | None = None,
    ):
        if countdown_start < 0:
            raise ValueError(f"countdown_start must be >= 0, got {countdown_start}")
        self._scheduler = scheduler
        self._clock = clock
        self.countdown_start = countdown_start
        self.countdown_interval = countdown_interval
        self.on_complete = on_complete
        self.on_request_passage = on_request_passage
        self.on_change = on_change

        self.target: Passage | None = None
        self.state = SessionState.IDLE
        self.start_timestamp: float | None = None
        self.keystroke_count = 0
        self.composing = False
        self.committed_value = ""
        self.countdown_value: int | None = None
        self.judgment = unjudged("")
        self._pending_tick: ScheduledCall | None = None

    # -----------------------
    # public API
    # -----------------------
    @property
    def view(self) -> SessionView:
        return SessionView(
            state=self.state,
            countdown_value=self.countdown_value,
            input_enabled=self.state == SessionState.ACTIVE,
            composing=self.composing,
            committed_value=self.committed_value,
            judgment=self.judgment,
        )

    def dispatch(self, event: SessionEvent) -> CompletionMeasurement | None:
        """Apply one event. Returns the measurement if this event completed the round."""
        handler = self._HANDLERS[event.type]
        result = handler(self, event)
        if self.on_change is not None:
            self.on_change(self.view)
        return result

    def set_target(self, passage: Passage) -> None:
        self.dispatch(SessionEvent.set_target(passage))

    def start_countdown(self) -> None:
        self.dispatch(SessionEvent.start())

    def key_down(self, key: str) -> None:
        self.dispatch(SessionEvent.key_down(key))

    def input_changed(self, value: str) -> CompletionMeasurement | None:
        return self.dispatch(SessionEvent.input_changed(value))

    def composition_start(self) -> None:
        self.dispatch(SessionEvent.composition_start())

    def composition_end(self, value: str) -> CompletionMeasurement | None:
        return self.dispatch(SessionEvent.composition_end(value))

    def skip(self) -> None:
        self.dispatch(SessionEvent.skip())

    # -----------------------
    # transitions
    # -----------------------
    def _on_set_target(self, event: SessionEvent) -> None:
        if event.passage is None:
            raise ValueError("SET_TARGET requires a passage")
        self.target = event.passage
        self._reset_round()
        self.state = SessionState.IDLE
        logger.debug(f"[SESSION] Target set ({self.target.length} chars, {self.target.difficulty})")

    def _on_start(self, _event: SessionEvent) -> None:
        if self.target is None:
            logger.debug("[SESSION] Start ignored: no target")
            return
        if self.state in (SessionState.COUNTDOWN, SessionState.ACTIVE):
            logger.debug(f"[SESSION] Start while {self.state}: focus only")
            return

        self._reset_round()
        self.state = SessionState.COUNTDOWN
        self.countdown_value = self.countdown_start
        self._schedule_tick()
        logger.debug(f"[SESSION] Countdown started at {self.countdown_value}")

    def _on_countdown_tick(self, _event: SessionEvent) -> None:
        self._pending_tick = None
        if self.state != SessionState.COUNTDOWN or self.countdown_value is None:
            return
        if self.countdown_value > 0:
            self.countdown_value -= 1
            self._schedule_tick()
            return

        self.countdown_value = None
        self.state = SessionState.ACTIVE
        self.start_timestamp = None
        self.keystroke_count = 0
        self.composing = False
        self.committed_value = ""
        self.judgment = unjudged(self.target.text if self.target else "")
        logger.debug("[SESSION] Round active")

    def _on_key_down(self, event: SessionEvent) -> None:
        if self.state != SessionState.ACTIVE:
            return
        if is_counted_key(event.key):
            self.keystroke_count += 1

    def _on_input_changed(self, event: SessionEvent) -> CompletionMeasurement | None:
        if self.state != SessionState.ACTIVE:
            return None
        value = event.value or ""
        if value and self.start_timestamp is None:
            self.start_timestamp = self._clock()
        if self.composing:
            self.judgment = unjudged(self.target.text)
            return None
        return self._commit(value)

    def _on_composition_start(self, _event: SessionEvent) -> None:
        if self.state != SessionState.ACTIVE:
            return
        self.composing = True
        self.judgment = unjudged(self.target.text)

    def _on_composition_end(self, event: SessionEvent) -> CompletionMeasurement | None:
        if self.state != SessionState.ACTIVE:
            self.composing = False
            return None
        self.composing = False
        value = event.value if event.value is not None else self.committed_value
        if value and self.start_timestamp is None:
            self.start_timestamp = self._clock()
        return self._commit(value)

    def _on_skip(self, _event: SessionEvent) -> None:
        self._reset_round()
        self.state = SessionState.ABORTED
        logger.info("[SESSION] Round skipped")
        if self.on_request_passage is not None:
            self.on_request_passage()

    _HANDLERS: dict[SessionEventType, Callable[["SessionStateMachine", SessionEvent], CompletionMeasurement | None]] = {
        SessionEventType.SET_TARGET: _on_set_target,
        SessionEventType.START: _on_start,
        SessionEventType.COUNTDOWN_TICK: _on_countdown_tick,
        SessionEventType.KEY_DOWN: _on_key_down,
        SessionEventType.INPUT_CHANGED: _on_input_changed,
        SessionEventType.COMPOSITION_START: _on_composition_start,
        SessionEventType.COMPOSITION_END: _on_composition_end,
        SessionEventType.SKIP: _on_skip,
    }

    # -----------------------
    # helpers
    # -----------------------
    def _commit(self, value: str) -> CompletionMeasurement | None:
        target = self.target.text
        self.committed_value = value
        self.judgment = judge(target, value)
        if value != target:
            return None
        return self._complete()

    def _complete(self) -> CompletionMeasurement:
        now = self._clock()
        start = self.start_timestamp if self.start_timestamp is not None else now
        measurement = CompletionMeasurement(
            typed_length=len(self.target.text),
            elapsed_seconds=max(MIN_ELAPSED_SECONDS, now - start),
            keystrokes=max(1, self.keystroke_count),
        )
        self.state = SessionState.COMPLETED
        logger.info(
            f"[SESSION] Completed: {measurement.typed_length} chars in "
            f"{measurement.elapsed_seconds:.3f}s with {measurement.keystrokes} keystrokes"
        )
        if self.on_complete is not None:
            self.on_complete(measurement)
        return measurement

    def _schedule_tick(self) -> None:
        self._pending_tick = self._scheduler.call_later(
            self.countdown_interval,
            lambda: self.dispatch(SessionEvent.countdown_tick()),
        )

    def _cancel_tick(self) -> None:
        if self._pending_tick is not None:
            self._pending_tick.cancel()
            self._pending_tick = None

    def _reset_round(self) -> None:
        self._cancel_tick()
        self.start_timestamp = None
        self.keystroke_count = 0
        self.composing = False
        self.committed_value = ""
        self.countdown_value = None
        self.judgment = unjudged(self.target.text if self.target else "")
