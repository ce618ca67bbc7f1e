"""Passage difficulty tagging.

score = length + punctuation * 6 + katakana_ratio * 80, rounded half up.
Labels: score <= 145 easy, <= 190 normal, otherwise hard.
"""

import re

from typing_arena.corpus.models import Difficulty, Passage
from typing_arena.metrics.calculator import round_half_up

PUNCTUATION_RE = re.compile(r"[、。，．,.！!？?]")
KATAKANA_RE = re.compile(r"[゠-ヿ]")
# Alphanumerics (half and full width), hiragana, katakana and CJK ideographs
WORD_CHAR_RE = re.compile(r"[0-9A-Za-z０-９Ａ-Ｚａ-ｚ぀-ゟ゠-ヿ㐀-䶿一-鿿々]")

PUNCTUATION_WEIGHT = 6
KATAKANA_WEIGHT = 80
EASY_MAX_SCORE = 145
NORMAL_MAX_SCORE = 190


def count_punctuation(text: str) -> int:
    return len(PUNCTUATION_RE.findall(text))


def katakana_ratio(text: str) -> float:
    """Katakana characters over word characters, 0 when there are none."""
    total = len(WORD_CHAR_RE.findall(text))
    if total == 0:
        return 0.0
    return len(KATAKANA_RE.findall(text)) / total


def difficulty_score(length: int, punctuation_count: int, kata_ratio: float) -> int:
    return round_half_up(length + punctuation_count * PUNCTUATION_WEIGHT + kata_ratio * KATAKANA_WEIGHT)


def difficulty_for_score(score: int) -> Difficulty:
    if score <= EASY_MAX_SCORE:
        return Difficulty.EASY
    if score <= NORMAL_MAX_SCORE:
        return Difficulty.NORMAL
    return Difficulty.HARD


def tag_passage(
    text: str,
    category: str = "",
    theme: str = "",
    length: int | None = None,
) -> Passage:
    """Build a tagged Passage from raw text.

    Args:
        text: Passage text
        category: Optional category
        theme: Optional theme
        length: Optional length override; defaults to len(text)
    """
    effective_length = len(text) if length is None else length
    punctuation = count_punctuation(text)
    ratio = katakana_ratio(text)
    score = difficulty_score(effective_length, punctuation, ratio)
    return Passage(
        text=text,
        length=effective_length,
        punctuation_count=punctuation,
        katakana_ratio=ratio,
        difficulty_score=score,
        difficulty=difficulty_for_score(score),
        category=category,
        theme=theme,
    )
