from collections.abc import Iterable, Sequence

from typing_arena.corpus.models import Passage

DEFAULT_RECENT_POOL_SIZE = 10


class RecentPool:
    """Bounded most-recent-first history of served passage texts.

    Used only as a soft exclusion filter: if excluding recent texts would
    leave nothing to pick from, the caller falls back to the full pool.
    """

    def __init__(self, max_size: int = DEFAULT_RECENT_POOL_SIZE, initial: Iterable[str] = ()):
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size
        self._texts: list[str] = []
        for text in reversed(list(initial)):
            self.remember(text)

    def remember(self, text: str) -> None:
        """Move text to the front, dropping the oldest entry past max_size."""
        if text in self._texts:
            self._texts.remove(text)
        self._texts.insert(0, text)
        del self._texts[self.max_size :]

    def __contains__(self, text: object) -> bool:
        return text in self._texts

    def __len__(self) -> int:
        return len(self._texts)

    @property
    def entries(self) -> list[str]:
        return list(self._texts)

    def exclude(self, pool: Sequence[Passage]) -> list[Passage]:
        """Pool without recent texts; the pool itself if that would be empty."""
        fresh = [p for p in pool if p.text not in self._texts]
        return fresh if fresh else list(pool)

    def clear(self) -> None:
        self._texts.clear()
