"""Process-scoped game context.

Holds what would otherwise be module globals: the loaded corpus, the recent
pool, the random source, the local-date provider and the daily theme cache.
Built once after the corpus loads; components receive it explicitly.
"""

import random
from collections.abc import Callable, Sequence
from datetime import date
from pathlib import Path

from loguru import logger

from typing_arena.corpus.loader import load_corpus
from typing_arena.corpus.models import Passage
from typing_arena.selection.daily_theme import date_key, distinct_themes, select_daily_theme
from typing_arena.selection.filters import FilterContext
from typing_arena.selection.picker import pick_passage
from typing_arena.selection.recent_pool import DEFAULT_RECENT_POOL_SIZE, RecentPool


class GameContext:
    def __init__(
        self,
        passages: Sequence[Passage],
        recent: RecentPool | None = None,
        rng: random.Random | None = None,
        today: Callable[[], date] = date.today,
    ):
        if not passages:
            raise ValueError("GameContext needs at least one passage")
        self.passages: tuple[Passage, ...] = tuple(passages)
        self.recent = recent or RecentPool(DEFAULT_RECENT_POOL_SIZE)
        self.rng = rng or random.Random()
        self.today = today
        self.themes: list[str] = distinct_themes(p.theme for p in self.passages)
        self.categories: list[str] = sorted({p.category for p in self.passages if p.category})
        self._daily_cache: dict[str, str | None] = {}

    @classmethod
    def from_corpus_file(
        cls,
        path: str | Path,
        recent_pool_size: int = DEFAULT_RECENT_POOL_SIZE,
        rng: random.Random | None = None,
        today: Callable[[], date] = date.today,
    ) -> "GameContext":
        """Load a corpus and build a context around it.

        Raises:
            CorpusLoadError: If the corpus cannot be loaded
        """
        return cls(load_corpus(path), recent=RecentPool(recent_pool_size), rng=rng, today=today)

    def daily_theme(self, day: date | None = None) -> str | None:
        key = date_key(day or self.today())
        if key not in self._daily_cache:
            self._daily_cache[key] = select_daily_theme(key, self.themes)
            logger.info(f"[CONTEXT] Daily theme for {key}: {self._daily_cache[key]!r}")
        return self._daily_cache[key]

    def resolve_filters(self, filters: FilterContext) -> FilterContext:
        """Copy of filters with today's daily theme filled in."""
        return filters.model_copy(update={"daily_theme": self.daily_theme()})

    def pick(self, filters: FilterContext) -> Passage | None:
        return pick_passage(self.passages, self.resolve_filters(filters), self.recent, self.rng)
