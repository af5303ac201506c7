"""
Locations of the database and log file. MOOD_MUSIC_DB overrides the database path.
"""

from __future__ import annotations

import os
from pathlib import Path

DB_PATH_ENV = "MOOD_MUSIC_DB"
LOG_LEVEL_ENV = "MOOD_MUSIC_LOG_LEVEL"

DEFAULT_DB_PATH = Path("data") / "moodmusic.db"


def get_db_path() -> Path:
    """Return path to the application SQLite database (relative to the working directory by default)."""
    override = os.environ.get(DB_PATH_ENV, "").strip()
    return Path(override) if override else DEFAULT_DB_PATH


def get_data_dir() -> Path:
    return get_db_path().parent


def get_log_file_path() -> Path:
    return get_data_dir() / "moodmusic.log"
