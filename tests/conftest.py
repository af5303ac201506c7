"""Shared fixtures: a fresh, initialized database per test with a non-sleeping retry policy."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from mood_music.db.connection import ConnectionManager, RetryPolicy
from mood_music.db.schema import init_and_seed


@pytest.fixture
def sleeps() -> list[float]:
    """Delays requested by the retry policy (nothing actually sleeps)."""
    return []


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "moodmusic.db"


@pytest.fixture
def db(db_path: Path, sleeps: list[float]):
    manager = ConnectionManager(db_path, retry=RetryPolicy(sleep=sleeps.append))
    init_and_seed(manager)
    yield manager
    manager.close()
