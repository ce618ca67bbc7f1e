import time
from collections.abc import Callable

DEFAULT_SAVE_COOLDOWN_SECONDS = 15.0


class SaveCooldown:
    """Suppresses saving a completion too soon after the previous saved one.

    Tracked per participant. Only completions that were actually persisted
    start a new window.
    """

    def __init__(self, window_seconds: float = DEFAULT_SAVE_COOLDOWN_SECONDS, clock: Callable[[], float] = time.monotonic):
        if window_seconds < 0:
            raise ValueError(f"window_seconds must be >= 0, got {window_seconds}")
        self.window_seconds = window_seconds
        self._clock = clock
        self._last_saved: dict[str, float] = {}

    def remaining(self, participant: str) -> float:
        last = self._last_saved.get(participant)
        if last is None:
            return 0.0
        return max(0.0, self.window_seconds - (self._clock() - last))

    def allows(self, participant: str) -> bool:
        return self.remaining(participant) <= 0.0

    def mark_saved(self, participant: str) -> None:
        self._last_saved[participant] = self._clock()
