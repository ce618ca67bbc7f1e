"""Deterministic theme of the day.

The theme for a date is a pure function of the date string and the sorted
set of corpus themes: no "theme of the day" record is ever persisted, and
every process picks the same theme for the same date and corpus.
"""

from collections.abc import Iterable
from datetime import date

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193
_UINT32 = 0xFFFFFFFF


def date_key(day: date) -> str:
    """Calendar date as YYYY-MM-DD."""
    return day.strftime("%Y-%m-%d")


def fnv1a_32(value: str) -> int:
    """32-bit FNV-1a hash of the UTF-8 bytes of value."""
    h = FNV_OFFSET_BASIS
    for byte in value.encode("utf-8"):
        h ^= byte
        h = (h * FNV_PRIME) & _UINT32
    return h


def distinct_themes(themes: Iterable[str]) -> list[str]:
    """Sorted distinct non-empty themes."""
    return sorted({t for t in themes if t})


def select_daily_theme(day: str | date, themes: Iterable[str]) -> str | None:
    """Pick the theme of the day, None if there are no themes.

    Args:
        day: Date or YYYY-MM-DD string
        themes: Candidate themes (duplicates and order do not matter)
    """
    ordered = distinct_themes(themes)
    if not ordered:
        return None
    key = date_key(day) if isinstance(day, date) else day
    return ordered[fnv1a_32(key) % len(ordered)]
