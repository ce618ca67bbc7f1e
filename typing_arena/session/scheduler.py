"""Cancellable scheduled callbacks.

The countdown is a sequence of delayed ticks. Ticks are scheduled through
a Scheduler so the same state machine runs on an asyncio event loop in
production and on a manually advanced clock in tests.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from collections.abc import Callable
from typing import Protocol


class ScheduledCall(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall: ...


class AsyncioScheduler:
    """Schedules callbacks on an asyncio event loop.

    The loop is resolved lazily so the scheduler can be built outside a
    running loop and used once one is running.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class _ManualCall:
    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic scheduler driven by advance().

    Also serves as a clock: now() returns the scheduler's current time, so a
    state machine built with clock=scheduler.now measures elapsed time on the
    same timeline its ticks run on.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list[tuple[float, int, _ManualCall]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualCall:
        call = _ManualCall(self._now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (call.due, next(self._seq), call))
        return call

    @property
    def pending(self) -> int:
        return sum(1 for _, _, call in self._queue if not call.cancelled)

    def advance(self, seconds: float) -> None:
        """Move time forward, running every callback that falls due."""
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, call = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            if not call.cancelled:
                call.callback()
        self._now = target

    def run_pending(self) -> None:
        """Run callbacks until none are scheduled, advancing time as needed."""
        while self._queue:
            due, _, call = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            if not call.cancelled:
                call.callback()
