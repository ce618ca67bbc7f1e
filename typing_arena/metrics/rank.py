"""Rank classification and leaderboard ordering score.

Two independent outputs are derived from the same metrics:

- rank: a coarse 7-tier label (D < C < B < A < S < SS < SSS) shown to the
  participant, based on speed and efficiency floors
- ranking score: a continuous number used only to order leaderboard rows

A third, advisory output is the difficulty-adjusted grade ladder
(G- ... SSS+), stored with history rows for finer progress tracking.
"""

from enum import StrEnum

from typing_arena.metrics.calculator import efficiency, round_half_up


class Rank(StrEnum):
    D = "D"
    C = "C"
    B = "B"
    A = "A"
    S = "S"
    SS = "SS"
    SSS = "SSS"


RANK_ORDER: tuple[Rank, ...] = (Rank.D, Rank.C, Rank.B, Rank.A, Rank.S, Rank.SS, Rank.SSS)

# (rank, min cpm, min eff), evaluated top-down; first match wins.
# C has no efficiency floor.
RANK_THRESHOLDS: tuple[tuple[Rank, int, float], ...] = (
    (Rank.SSS, 420, 0.92),
    (Rank.SS, 360, 0.88),
    (Rank.S, 320, 0.84),
    (Rank.A, 260, 0.78),
    (Rank.B, 200, 0.72),
    (Rank.C, 150, 0.0),
)

SCORE_EFFICIENCY_WEIGHT = 100.0
SCORE_WASTE_PENALTY = 0.3


def classify_rank(cpm: float, eff: float) -> Rank:
    """Classify a performance into one of the 7 rank tiers.

    Total on (cpm, eff) >= (0, 0). Efficiency above 1 is not clamped.
    """
    for rank, min_cpm, min_eff in RANK_THRESHOLDS:
        if cpm >= min_cpm and eff >= min_eff:
            return rank
    return Rank.D


def rank_index(rank: str) -> int:
    """Position of a rank label in ascending order, -1 if unknown."""
    try:
        return RANK_ORDER.index(Rank(rank))
    except ValueError:
        return -1


def ranking_score(cpm: int, kpm: int) -> int:
    """Continuous score used to sort leaderboard rows.

    cpm + eff * 100 - waste * 0.3, where eff is guarded against kpm == 0
    and waste is the keystroke surplus floored at zero.
    """
    eff = efficiency(cpm, kpm)
    waste = max(0, kpm - cpm)
    return round_half_up(cpm * 1.0 + eff * SCORE_EFFICIENCY_WEIGHT - waste * SCORE_WASTE_PENALTY)


# Difficulty-adjusted grade ladder: 30 grades, one every 7 adjusted CPM
GRADE_LADDER: tuple[str, ...] = tuple(
    f"{letter}{suffix}"
    for letter in ("G", "F", "E", "D", "C", "B", "A", "S", "SS", "SSS")
    for suffix in ("-", "", "+")
)
GRADE_STEP = 7
GRADE_DIFFICULTY_FACTORS: dict[str, float] = {
    "easy": 1.05,
    "normal": 1.0,
    "hard": 0.92,
}


def grade_by_cpm(cpm: float, difficulty: str = "normal") -> str:
    """Map CPM to the fine-grained grade ladder.

    Easy passages need slightly more CPM for the same grade, hard ones
    slightly less. Unknown difficulties use the normal factor.
    """
    factor = GRADE_DIFFICULTY_FACTORS.get(difficulty, 1.0)
    adjusted = max(0.0, float(cpm or 0)) / factor
    step = min(int(adjusted // GRADE_STEP), len(GRADE_LADDER) - 1)
    return GRADE_LADDER[step]


def grade_index(grade: str | None) -> int:
    """Position of a grade in ascending order, -1 if unknown."""
    if not grade or grade not in GRADE_LADDER:
        return -1
    return GRADE_LADDER.index(grade)
