"""Shared fixtures for CLI tests."""

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop sinks a command installed so later tests never log into a runner's stream."""
    yield
    logger.remove()
