"""Leaderboard partition addressing.

Partition names are derived deterministically from the filter dimensions:

    rankings__overall__diff_<d>
    rankings__category__<category>__diff_<d>
    rankings__theme__<theme>__diff_<d>
    rankings__daily__<YYYY-MM-DD>__<daily theme>__diff_<d>

The date is part of the daily name, so daily boards reset at local midnight
without any deletion step: the next day simply addresses a new partition.
"""

from datetime import date
from enum import StrEnum

from typing_arena.leaderboard.sanitize import sanitize_key
from typing_arena.selection.daily_theme import date_key
from typing_arena.selection.filters import ALL, FilterContext

PARTITION_PREFIX = "rankings"
SEPARATOR = "__"


class Scope(StrEnum):
    OVERALL = "overall"
    DAILY = "daily"
    CATEGORY = "category"
    THEME = "theme"


ALL_SCOPES: tuple[Scope, ...] = (Scope.OVERALL, Scope.CATEGORY, Scope.THEME, Scope.DAILY)


def difficulty_key(difficulty: str) -> str:
    value = str(difficulty or ALL)
    return f"diff_{sanitize_key(value)}"


def partition_name(
    scope: Scope | str,
    difficulty: str,
    category: str | None = ALL,
    theme: str | None = ALL,
    daily_theme: str | None = None,
    day: date | None = None,
) -> str:
    """Derive the partition name for one leaderboard scope.

    Args:
        scope: overall | daily | category | theme
        difficulty: Difficulty filter (all | easy | normal | hard)
        category: Category filter; "all" addresses the all-categories board
        theme: Theme filter; "all" addresses the all-themes board
        daily_theme: Active daily theme (daily scope only)
        day: Calendar date (daily scope only)

    Raises:
        ValueError: If scope is unknown, or day is missing for the daily scope
    """
    scope = Scope(scope)
    d = difficulty_key(difficulty)

    if scope == Scope.OVERALL:
        parts = [PARTITION_PREFIX, scope.value, d]
    elif scope == Scope.CATEGORY:
        parts = [PARTITION_PREFIX, scope.value, sanitize_key(category or ALL), d]
    elif scope == Scope.THEME:
        parts = [PARTITION_PREFIX, scope.value, sanitize_key(theme or ALL), d]
    else:
        if day is None:
            raise ValueError("daily scope requires a date")
        parts = [PARTITION_PREFIX, scope.value, date_key(day), sanitize_key(daily_theme or ALL), d]

    return SEPARATOR.join(parts)


def partition_for_filters(scope: Scope | str, filters: FilterContext, day: date) -> str:
    return partition_name(
        scope,
        difficulty=filters.difficulty.value,
        category=filters.category,
        theme=filters.theme,
        daily_theme=filters.daily_theme,
        day=day,
    )


def write_scopes(filters: FilterContext) -> tuple[Scope, ...]:
    """Scopes a record saved under these filters is filed into.

    Every round goes to all four boards, whatever the daily toggle says.
    Only a corpus without themes, where no daily theme exists, skips the
    daily board.
    """
    if filters.daily_theme:
        return ALL_SCOPES
    return tuple(s for s in ALL_SCOPES if s != Scope.DAILY)


def history_partition(actor_id: str) -> str:
    return f"history{SEPARATOR}{sanitize_key(actor_id)}"
