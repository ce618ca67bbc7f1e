"""Tests for logger setup."""

import io
import sys

import pytest
from loguru import logger

from typing_arena.core.logger import setup_logger


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger.remove()


def test_console_sink_follows_current_stderr(monkeypatch):
    first = io.StringIO()
    monkeypatch.setattr(sys, "stderr", first)
    setup_logger(level="INFO")
    logger.info("first stream")
    assert "first stream" in first.getvalue()
    first.close()

    second = io.StringIO()
    monkeypatch.setattr(sys, "stderr", second)
    logger.info("second stream")
    assert "second stream" in second.getvalue()


def test_level_filters_console_output(monkeypatch):
    stream = io.StringIO()
    monkeypatch.setattr(sys, "stderr", stream)
    setup_logger(level="WARNING")
    logger.info("quiet")
    logger.warning("loud")
    assert "quiet" not in stream.getvalue()
    assert "loud" in stream.getvalue()


def test_file_sink_creates_log_directory(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "stderr", io.StringIO())
    log_file = tmp_path / "logs" / "arena.log"
    setup_logger(level="INFO", log_file=str(log_file))
    logger.info("to file")
    logger.remove()
    assert any(log_file.parent.iterdir())
