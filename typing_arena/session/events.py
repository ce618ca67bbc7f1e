"""Events consumed by the session state machine.

Every external stimulus (buttons, key presses, input changes, IME
composition, countdown timer ticks) becomes one SessionEvent and goes
through SessionStateMachine.dispatch.
"""

from dataclasses import dataclass
from enum import StrEnum

from typing_arena.corpus.models import Passage


class SessionEventType(StrEnum):
    SET_TARGET = "set_target"
    START = "start"
    COUNTDOWN_TICK = "countdown_tick"
    KEY_DOWN = "key_down"
    INPUT_CHANGED = "input_changed"
    COMPOSITION_START = "composition_start"
    COMPOSITION_END = "composition_end"
    SKIP = "skip"


@dataclass(frozen=True)
class SessionEvent:
    type: SessionEventType
    passage: Passage | None = None
    key: str | None = None
    value: str | None = None

    @classmethod
    def set_target(cls, passage: Passage) -> "SessionEvent":
        return cls(SessionEventType.SET_TARGET, passage=passage)

    @classmethod
    def start(cls) -> "SessionEvent":
        return cls(SessionEventType.START)

    @classmethod
    def countdown_tick(cls) -> "SessionEvent":
        return cls(SessionEventType.COUNTDOWN_TICK)

    @classmethod
    def key_down(cls, key: str) -> "SessionEvent":
        return cls(SessionEventType.KEY_DOWN, key=key)

    @classmethod
    def input_changed(cls, value: str) -> "SessionEvent":
        return cls(SessionEventType.INPUT_CHANGED, value=value)

    @classmethod
    def composition_start(cls) -> "SessionEvent":
        return cls(SessionEventType.COMPOSITION_START)

    @classmethod
    def composition_end(cls, value: str) -> "SessionEvent":
        return cls(SessionEventType.COMPOSITION_END, value=value)

    @classmethod
    def skip(cls) -> "SessionEvent":
        return cls(SessionEventType.SKIP)


EDIT_KEYS = frozenset({"Backspace", "Delete"})
COMMIT_KEYS = frozenset({" ", "Enter"})


def is_counted_key(key: str | None) -> bool:
    """Printable single characters, edit keys and IME commit keys count as keystrokes."""
    if not key:
        return False
    return len(key) == 1 or key in EDIT_KEYS or key in COMMIT_KEYS
