"""Typing Arena: timed transcription rounds, metrics, ranks and leaderboards."""

__version__ = "0.1.0"
