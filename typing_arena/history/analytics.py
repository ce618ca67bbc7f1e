"""History analytics.

Aggregates a participant's recent rounds into a summary:
play count, best and average speed, average efficiency, rank distribution
and per-difficulty averages. Pure functions over already-fetched rows.
"""

from collections import Counter
from collections.abc import Sequence

from pydantic import BaseModel

from typing_arena.history.service import HistoryEntry
from typing_arena.metrics.rank import RANK_ORDER


class DifficultyAverage(BaseModel):
    difficulty: str
    plays: int
    avg_cpm: float
    avg_eff: float


class HistorySummary(BaseModel):
    plays: int
    best_cpm: int
    best_ranking_score: int
    avg_cpm: float
    avg_kpm: float
    avg_eff: float
    rank_counts: dict[str, int]
    by_difficulty: list[DifficultyAverage]


def _mean(values: Sequence[float], digits: int = 2) -> float:
    return round(sum(values) / len(values), digits) if values else 0.0


def summarize_history(entries: Sequence[HistoryEntry]) -> HistorySummary:
    if not entries:
        return HistorySummary(
            plays=0,
            best_cpm=0,
            best_ranking_score=0,
            avg_cpm=0.0,
            avg_kpm=0.0,
            avg_eff=0.0,
            rank_counts={r.value: 0 for r in RANK_ORDER},
            by_difficulty=[],
        )

    ranks = Counter(e.rank for e in entries)
    rank_counts = {r.value: ranks.get(r.value, 0) for r in RANK_ORDER}

    grouped: dict[str, list[HistoryEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.item_difficulty or "unknown", []).append(entry)

    by_difficulty = [
        DifficultyAverage(
            difficulty=difficulty,
            plays=len(rows),
            avg_cpm=_mean([r.cpm for r in rows]),
            avg_eff=_mean([r.eff for r in rows], digits=4),
        )
        for difficulty, rows in sorted(grouped.items())
    ]

    return HistorySummary(
        plays=len(entries),
        best_cpm=max(e.cpm for e in entries),
        best_ranking_score=max(e.ranking_score for e in entries),
        avg_cpm=_mean([e.cpm for e in entries]),
        avg_kpm=_mean([e.kpm for e in entries]),
        avg_eff=_mean([e.eff for e in entries], digits=4),
        rank_counts=rank_counts,
        by_difficulty=by_difficulty,
    )
