"""Tests for app state lifecycle, preferences, media resolution, moods and logging setup."""

import sys
from pathlib import Path

import pytest
from loguru import logger

from mood_music.config import DB_PATH_ENV, DEFAULT_DB_PATH, LOG_LEVEL_ENV, get_db_path
from mood_music.db.connection import RetryPolicy
from mood_music.db.song_repo import count_songs, get_all_songs
from mood_music.db.user_repo import DEFAULT_ADMIN_PASSWORD, authenticate
from mood_music.errors import InitializationError, MediaNotFound, ValidationError
from mood_music.logging_setup import setup_logging
from mood_music.moods import ALL_MOODS, MOODS, is_all_moods, mood_label, normalize_mood
from mood_music.services import app_state, preferences
from mood_music.services.app_state import AppState
from mood_music.services.media import resolve_media_source


@pytest.fixture
def data_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    db_file = tmp_path / "data" / "moodmusic.db"
    monkeypatch.setenv(DB_PATH_ENV, str(db_file))
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    return db_file


# --- config ---

def test_db_path_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(DB_PATH_ENV, raising=False)
    assert get_db_path() == DEFAULT_DB_PATH == Path("data") / "moodmusic.db"


def test_db_path_env_override(data_env: Path) -> None:
    assert get_db_path() == data_env


# --- app state ---

def test_app_state_lifecycle(data_env: Path) -> None:
    state = AppState()
    assert state.db.db_path == data_env
    state.initialize()
    state.initialize()
    assert state.initialized
    assert count_songs(state.db) == len(MOODS)
    assert authenticate(state.db, "admin", DEFAULT_ADMIN_PASSWORD).is_admin
    state.shutdown()
    state.shutdown()
    assert not state.db.is_open
    assert data_env.exists()


def test_app_state_context_manager(tmp_path: Path) -> None:
    with AppState(tmp_path / "db" / "m.db") as state:
        assert len(get_all_songs(state.db)) == len(MOODS)
    assert not state.db.is_open


def test_app_state_initialize_failure_is_fatal(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    state = AppState(blocker / "m.db", retry=RetryPolicy(sleep=lambda _: None))
    with pytest.raises(InitializationError):
        state.initialize()
    assert not state.initialized
    state.shutdown()


def test_app_state_exit_hook_follows_lifecycle(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    registered: list[object] = []
    unregistered: list[object] = []
    monkeypatch.setattr(app_state.atexit, "register", registered.append)
    monkeypatch.setattr(app_state.atexit, "unregister", unregistered.append)

    state = AppState(tmp_path / "m.db")
    assert len(registered) == 1
    state.initialize()
    assert len(registered) == 1
    state.shutdown()
    state.shutdown()
    assert len(unregistered) == 1
    # Reused after shutdown: the hook comes back so the connection is still closed at exit.
    state.initialize()
    assert len(registered) == 2
    assert registered[-1] == state.shutdown
    state.shutdown()
    assert len(unregistered) == 2


# --- preferences ---

def test_preferences_missing_file(data_env: Path) -> None:
    assert preferences.load_preferences() == {}
    assert preferences.get_log_level() == "INFO"
    assert preferences.get_last_mood_filter() == ALL_MOODS
    assert preferences.get_last_playlist() is None


def test_preferences_round_trip(data_env: Path) -> None:
    preferences.set_last_mood_filter("Calm")
    preferences.set_last_playlist("Chill")
    preferences.set_log_level("debug")
    assert (data_env.parent / "preferences.json").exists()
    assert preferences.get_last_mood_filter() == "Calm"
    assert preferences.get_last_playlist() == "Chill"
    assert preferences.get_log_level() == "DEBUG"
    preferences.set_last_mood_filter(ALL_MOODS)
    preferences.set_last_playlist(None)
    assert preferences.get_last_mood_filter() == ALL_MOODS
    assert preferences.get_last_playlist() is None


def test_preferences_invalid_json(data_env: Path) -> None:
    data_env.parent.mkdir(parents=True)
    (data_env.parent / "preferences.json").write_text("{not json", encoding="utf-8")
    assert preferences.load_preferences() == {}


def test_log_level_env_wins(data_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    preferences.set_log_level("ERROR")
    monkeypatch.setenv(LOG_LEVEL_ENV, "warning")
    assert preferences.get_log_level() == "WARNING"
    monkeypatch.setenv(LOG_LEVEL_ENV, "loud")
    assert preferences.get_log_level() == "INFO"


# --- media ---

def test_media_empty_path_means_no_media() -> None:
    assert resolve_media_source("") is None
    assert resolve_media_source(None) is None
    assert resolve_media_source("   ") is None


def test_media_url_spaces_encoded() -> None:
    assert resolve_media_source("http://example.com/my song.mp3") == "http://example.com/my%20song.mp3"
    assert resolve_media_source("HTTPS://example.com/a.mp3") == "HTTPS://example.com/a.mp3"


def test_media_local_file(tmp_path: Path) -> None:
    f = tmp_path / "track.mp3"
    f.write_bytes(b"")
    assert resolve_media_source(str(f)) == f.resolve().as_uri()


def test_media_missing_local_file(tmp_path: Path) -> None:
    with pytest.raises(MediaNotFound):
        resolve_media_source(str(tmp_path / "missing.mp3"))


# --- moods ---

def test_normalize_mood() -> None:
    assert normalize_mood(" focus ") == "Focus"
    assert normalize_mood("ENERGETIC") == "Energetic"
    with pytest.raises(ValidationError):
        normalize_mood("")
    with pytest.raises(ValidationError):
        normalize_mood("Angry")


def test_mood_helpers() -> None:
    assert is_all_moods(None)
    assert is_all_moods("all")
    assert not is_all_moods("Happy")
    assert mood_label("Focus").endswith(" Focus")
    assert mood_label("Other") == "Other"


# --- logging ---

def test_setup_logging_writes_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "moodmusic.log"
    try:
        assert setup_logging("DEBUG", log_file=log_file, console=False) == log_file
        logger.debug("hello from test")
        assert "hello from test" in log_file.read_text(encoding="utf-8")
    finally:
        logger.remove()
        logger.add(sys.stderr)
