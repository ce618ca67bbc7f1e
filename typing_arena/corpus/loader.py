"""Corpus loading.

The corpus is a JSON array of passage records. Each record needs a "text"
field and may carry "category", "theme" and "length" overrides. Records
without text are dropped; anything else that fails to parse rejects the
whole corpus.
"""

import json
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError

from typing_arena.corpus.models import Passage
from typing_arena.corpus.tagging import tag_passage
from typing_arena.errors import CorpusLoadError


class PassageRecord(BaseModel):
    """One raw corpus entry before tagging."""

    model_config = ConfigDict(extra="ignore", strict=True)

    text: str | None = None
    category: str | None = None
    theme: str | None = None
    length: int | None = None


def parse_corpus(raw: Any) -> list[Passage]:
    """Tag every usable record of an already-decoded corpus.

    Raises:
        CorpusLoadError: If the top level is not a list, a record is not an
            object or has a field of the wrong type, or no record carries text
    """
    if not isinstance(raw, list):
        raise CorpusLoadError(f"Corpus must be a JSON array, got {type(raw).__name__}")

    passages: list[Passage] = []
    dropped = 0
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise CorpusLoadError(f"Invalid corpus record at index {index}: expected an object, got {type(item).__name__}")
        try:
            record = PassageRecord.model_validate(item)
        except ValidationError as e:
            raise CorpusLoadError(f"Invalid corpus record at index {index}: {e}") from e

        if not record.text or not record.text.strip():
            dropped += 1
            continue
        if record.length is not None and record.length < 0:
            raise CorpusLoadError(f"Invalid corpus record at index {index}: negative length {record.length}")

        passages.append(
            tag_passage(
                record.text,
                category=(record.category or "").strip(),
                theme=(record.theme or "").strip(),
                length=record.length,
            )
        )

    if dropped:
        logger.warning(f"[CORPUS] Dropped {dropped} record(s) without text")
    if not passages:
        raise CorpusLoadError("Corpus contains no passages")

    logger.info(f"[CORPUS] Loaded {len(passages)} passages")
    return passages


def load_corpus(path: str | Path) -> list[Passage]:
    """Read and tag a corpus file.

    Raises:
        CorpusLoadError: If the file cannot be read or parsed
    """
    corpus_path = Path(path)
    logger.info(f"[CORPUS] Loading corpus from {corpus_path}")
    try:
        raw = json.loads(corpus_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise CorpusLoadError(f"Cannot read corpus file {corpus_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CorpusLoadError(f"Corpus file {corpus_path} is not valid JSON: {e}") from e
    return parse_corpus(raw)
