"""PerformanceRecord - the immutable result of one completed round."""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict

from typing_arena.corpus.models import Passage
from typing_arena.metrics.calculator import compute_metrics
from typing_arena.metrics.rank import Rank, classify_rank, grade_by_cpm, ranking_score
from typing_arena.selection.filters import FilterContext, FrozenFilterContext
from typing_arena.session.state_machine import CompletionMeasurement

EFF_DECIMALS = 4


class PerformanceRecord(BaseModel):
    """Metrics, rank and context of one completed round.

    Computed once per completed round and fanned out unchanged to every
    leaderboard partition and to the participant's history.
    """

    model_config = ConfigDict(frozen=True)

    typed_length: int
    elapsed_seconds: float
    keystroke_count: int

    cpm: int
    kpm: int
    wpm: int
    diff: int
    eff: float
    rank: Rank
    grade: str
    ranking_score: int

    filter_context: FrozenFilterContext
    played_on: date

    item_difficulty: str
    item_category: str
    item_theme: str
    item_length: int
    item_punct: int
    item_kata_ratio: float

    def to_document(self, name: str, actor_id: str) -> dict[str, Any]:
        """Document body written to leaderboard and history partitions."""
        return {
            "name": name,
            "actor_id": actor_id,
            "ranking_score": self.ranking_score,
            "cpm": self.cpm,
            "kpm": self.kpm,
            "wpm": self.wpm,
            "diff": self.diff,
            "eff": round(self.eff, EFF_DECIMALS),
            "rank": self.rank.value,
            "grade": self.grade,
            "seconds": self.elapsed_seconds,
            "typed_length": self.typed_length,
            "keystrokes": self.keystroke_count,
            "played_on": self.played_on.isoformat(),
            "item_difficulty": self.item_difficulty,
            "item_category": self.item_category,
            "item_theme": self.item_theme,
            "item_length": self.item_length,
            "item_punct": self.item_punct,
            "item_kata_ratio": self.item_kata_ratio,
        }


def build_performance_record(
    measurement: CompletionMeasurement,
    passage: Passage,
    filters: FilterContext,
    played_on: date,
) -> PerformanceRecord:
    """Turn a raw completion into a PerformanceRecord.

    The filter context is snapshotted here, so changes made after the round
    finished do not affect where the record is filed.
    """
    metrics = compute_metrics(measurement.typed_length, measurement.elapsed_seconds, measurement.keystrokes)
    return PerformanceRecord(
        typed_length=measurement.typed_length,
        elapsed_seconds=measurement.elapsed_seconds,
        keystroke_count=measurement.keystrokes,
        cpm=metrics.cpm,
        kpm=metrics.kpm,
        wpm=metrics.wpm,
        diff=metrics.diff,
        eff=metrics.eff,
        rank=classify_rank(metrics.cpm, metrics.eff),
        grade=grade_by_cpm(metrics.cpm, passage.difficulty.value),
        ranking_score=ranking_score(metrics.cpm, metrics.kpm),
        filter_context=filters.snapshot(),
        played_on=played_on,
        item_difficulty=passage.difficulty.value,
        item_category=passage.category,
        item_theme=passage.theme,
        item_length=passage.length,
        item_punct=passage.punctuation_count,
        item_kata_ratio=passage.katakana_ratio,
    )
