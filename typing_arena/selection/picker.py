"""Passage selection for the next round."""

import random
from collections.abc import Sequence

from loguru import logger

from typing_arena.corpus.models import Passage
from typing_arena.selection.filters import ALL, DifficultyFilter, FilterContext
from typing_arena.selection.recent_pool import RecentPool


def filter_pool(passages: Sequence[Passage], filters: FilterContext) -> list[Passage]:
    """Apply daily theme, category, theme and difficulty filters."""
    pool = list(passages)

    if filters.daily_theme_active and filters.daily_theme:
        pool = [p for p in pool if p.theme == filters.daily_theme]
    if filters.category != ALL:
        pool = [p for p in pool if p.category == filters.category]
    if filters.theme != ALL:
        pool = [p for p in pool if p.theme == filters.theme]
    if filters.difficulty != DifficultyFilter.ALL:
        pool = [p for p in pool if p.difficulty == filters.difficulty.value]

    return pool


def pick_passage(
    passages: Sequence[Passage],
    filters: FilterContext,
    recent: RecentPool,
    rng: random.Random | None = None,
) -> Passage | None:
    """Pick the next passage and record it in the recent pool.

    Passages matching the filters are preferred; if none match, the whole
    corpus is used. Recently served texts are skipped unless that leaves
    nothing.

    Returns:
        The chosen passage, or None for an empty corpus
    """
    if not passages:
        return None
    rng = rng or random.Random()

    pool = filter_pool(passages, filters)
    if not pool:
        logger.warning(f"[SELECTION] No passage matches filters {filters.model_dump()}, using the whole corpus")
        pool = list(passages)

    candidates = recent.exclude(pool)
    choice = rng.choice(candidates)
    recent.remember(choice.text)
    logger.debug(f"[SELECTION] Picked passage ({choice.difficulty}, {choice.category!r}, {choice.theme!r}) from {len(candidates)} candidates")
    return choice
