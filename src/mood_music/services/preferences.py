"""
User preferences (log level, last library filter, last playlist). Stored as JSON alongside the database.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from ..config import LOG_LEVEL_ENV, get_data_dir
from ..moods import ALL_MOODS, MOODS

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _preferences_path() -> Path:
    return get_data_dir() / "preferences.json"


def load_preferences() -> dict[str, Any]:
    """Load preferences from disk. Returns dict; missing file or invalid JSON => {}."""
    path = _preferences_path()
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def save_preferences(prefs: dict[str, Any]) -> None:
    """Save preferences to disk."""
    path = _preferences_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(prefs, f, indent=2)


def get_log_level() -> str:
    """MOOD_MUSIC_LOG_LEVEL, else the saved preference, else INFO. Unknown names fall back to INFO."""
    raw = os.environ.get(LOG_LEVEL_ENV) or load_preferences().get("log_level") or "INFO"
    level = str(raw).strip().upper()
    return level if level in _LOG_LEVELS else "INFO"


def set_log_level(level: str) -> None:
    prefs = load_preferences()
    prefs["log_level"] = level.strip().upper()
    save_preferences(prefs)


def get_last_mood_filter() -> str:
    """Mood last selected in the library filter; 'All' if unset or no longer valid."""
    v = load_preferences().get("last_mood_filter")
    return v if v in MOODS else ALL_MOODS


def set_last_mood_filter(mood: str | None) -> None:
    prefs = load_preferences()
    if mood is None or mood == ALL_MOODS:
        prefs.pop("last_mood_filter", None)
    else:
        prefs["last_mood_filter"] = mood
    save_preferences(prefs)


def get_last_playlist() -> str | None:
    v = load_preferences().get("last_playlist")
    return v if isinstance(v, str) and v else None


def set_last_playlist(name: str | None) -> None:
    prefs = load_preferences()
    if name:
        prefs["last_playlist"] = name
    else:
        prefs.pop("last_playlist", None)
    save_preferences(prefs)
