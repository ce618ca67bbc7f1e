"""Tests for corpus loading."""

import json
from pathlib import Path

import pytest

from typing_arena.corpus.loader import load_corpus, parse_corpus
from typing_arena.errors import CorpusLoadError

SHIPPED_CORPUS = Path(__file__).resolve().parents[2] / "data" / "passages.json"


def test_records_without_text_are_dropped():
    passages = parse_corpus(
        [
            {"text": "一つ目の文。", "category": "a", "theme": "x"},
            {"category": "no text"},
            {"text": "   "},
            {"text": "二つ目の文。", "theme": "y"},
        ]
    )
    assert [p.text for p in passages] == ["一つ目の文。", "二つ目の文。"]
    assert passages[1].category == ""
    assert passages[1].theme == "y"


def test_length_override_is_applied():
    (passage,) = parse_corpus([{"text": "短い", "length": 180}])
    assert passage.length == 180


def test_unknown_fields_are_ignored():
    (passage,) = parse_corpus([{"text": "文", "source": "book", "id": 3}])
    assert passage.text == "文"


@pytest.mark.parametrize(
    "raw",
    [
        {"text": "not a list"},
        [{"text": 5}],
        [{"text": "ok"}, {"text": "bad length", "length": "3"}],
        [{"text": "negative", "length": -1}],
        [{"category": "only"}],
        [{"text": "ok"}, "not a record"],
        [{"text": "ok"}, 42],
        [{"text": "ok"}, None],
        [],
    ],
)
def test_invalid_corpus_is_rejected_whole(raw):
    with pytest.raises(CorpusLoadError):
        parse_corpus(raw)


def test_load_corpus_from_file(tmp_path):
    path = tmp_path / "passages.json"
    path.write_text(json.dumps([{"text": "ファイルの文。", "theme": "t"}], ensure_ascii=False), encoding="utf-8")
    passages = load_corpus(path)
    assert len(passages) == 1
    assert passages[0].theme == "t"


def test_missing_file_raises(tmp_path):
    with pytest.raises(CorpusLoadError, match="Cannot read"):
        load_corpus(tmp_path / "missing.json")


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[{\"text\": ", encoding="utf-8")
    with pytest.raises(CorpusLoadError, match="not valid JSON"):
        load_corpus(path)


def test_shipped_corpus_loads():
    passages = load_corpus(SHIPPED_CORPUS)
    assert len(passages) >= 11
    assert all(p.theme for p in passages)
