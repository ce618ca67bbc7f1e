"""Typing speed metrics - single source of truth.

Converts a finished round (characters committed, seconds elapsed, physical
keystrokes) into per-minute rates:

- CPM: committed characters per minute
- KPM: keystrokes per minute (edits and IME conversion keys included)
- WPM: advisory words per minute, 5 characters = 1 word
- diff: KPM - CPM floored at zero (keystroke waste)
- eff: CPM / KPM, 0 when KPM is 0

All rates round half up, so 2.5 becomes 3 rather than Python's banker's 2.
"""

import math

from pydantic import BaseModel, ConfigDict

CHARS_PER_WORD = 5


class TypingMetrics(BaseModel):
    """Per-minute metrics for one completed round."""

    model_config = ConfigDict(frozen=True)

    cpm: int
    kpm: int
    wpm: int
    diff: int
    eff: float


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return math.floor(value + 0.5)


def efficiency(cpm: float, kpm: float) -> float:
    """CPM/KPM ratio guarded against a zero KPM."""
    return cpm / kpm if kpm > 0 else 0.0


def compute_metrics(typed_length: int, seconds: float, keystrokes: int) -> TypingMetrics:
    """Compute CPM/KPM/WPM/diff/eff for a completed round.

    No upper clamp is applied to any rate. Callers floor `seconds` before
    calling; this function only rejects values that would divide by zero.

    Args:
        typed_length: Number of committed characters
        seconds: Elapsed active typing time in seconds
        keystrokes: Number of counted key events

    Returns:
        TypingMetrics

    Raises:
        ValueError: If seconds is not positive or a count is negative

    Example:
        >>> compute_metrics(300, 60.0, 330)
        TypingMetrics(cpm=300, kpm=330, wpm=60, diff=30, eff=0.9090909090909091)
    """
    if seconds <= 0:
        raise ValueError(f"seconds must be positive, got {seconds}")
    if typed_length < 0 or keystrokes < 0:
        raise ValueError(f"counts must be non-negative, got typed_length={typed_length}, keystrokes={keystrokes}")

    minutes = seconds / 60
    cpm = round_half_up(typed_length / minutes)
    kpm = round_half_up(keystrokes / minutes)
    wpm = round_half_up((typed_length / CHARS_PER_WORD) / minutes)

    return TypingMetrics(
        cpm=cpm,
        kpm=kpm,
        wpm=wpm,
        diff=max(0, kpm - cpm),
        eff=efficiency(cpm, kpm),
    )
