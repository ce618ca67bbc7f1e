from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Difficulty(StrEnum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


class Passage(BaseModel):
    """A target passage, tagged once at load time and never re-tagged.

    Attributes:
        text: The text the participant must reproduce
        length: Character length (may be overridden by the corpus record)
        punctuation_count: Number of punctuation marks
        katakana_ratio: Katakana share of word characters, 0..1
        difficulty_score: Raw score the difficulty label was derived from
        difficulty: easy | normal | hard
        category: Free-text category, empty if the record carries none
        theme: Free-text theme, empty if the record carries none
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1)
    length: int = Field(..., ge=0)
    punctuation_count: int = Field(..., ge=0)
    katakana_ratio: float = Field(..., ge=0.0, le=1.0)
    difficulty_score: int
    difficulty: Difficulty
    category: str = ""
    theme: str = ""
