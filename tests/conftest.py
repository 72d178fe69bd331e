"""Shared fixtures for slackbox tests."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from slackbox.store import WatermarkStore


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path."""
    return tmp_path / "state" / "slackbox.db"


@pytest.fixture
def store(temp_db_path: Path) -> Iterator[WatermarkStore]:
    """Provide an open WatermarkStore on a temporary database."""
    with WatermarkStore(temp_db_path, clock=lambda: 1706000000.0) as s:
        yield s


@pytest.fixture(autouse=True)
def reset_slackbox_logging() -> Iterator[None]:
    """Drop handlers added by setup_logging so tests don't share log files."""
    yield
    logger = logging.getLogger("slackbox")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
