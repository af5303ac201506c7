"""Playlist and playlist membership persistence, plus mood-playlist generation."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger

from ..errors import MoodMusicError, RepositoryError, ValidationError
from ..moods import normalize_mood
from .connection import ConnectionManager
from .song_repo import SongRow, find_song_ids_by_mood

# Returned by create_playlist when the store could not be written.
PLAYLIST_ERROR = -1


@dataclass
class PlaylistRow:
    id: int
    name: str


@dataclass
class MoodPlaylistResult:
    playlist_id: int
    name: str
    song_ids: list[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.song_ids


def create_playlist(db: ConnectionManager, name: str) -> int:
    """
    Create a playlist and return its id. A duplicate name returns the existing id.
    Returns PLAYLIST_ERROR on a storage failure.
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Playlist name cannot be empty")
    try:
        with db.transaction() as conn:
            cur = conn.execute("INSERT OR IGNORE INTO playlists (name) VALUES (?)", (name,))
            if cur.rowcount == 1:
                logger.info(f"Created playlist '{name}'")
                return cur.lastrowid
            row = conn.execute("SELECT id FROM playlists WHERE name = ?", (name,)).fetchone()
            if row is None:
                raise RepositoryError(f"Playlist '{name}' was neither created nor found")
            return row[0]
    except (sqlite3.Error, MoodMusicError):
        logger.exception(f"Failed to create playlist '{name}'")
        return PLAYLIST_ERROR


def get_playlist(db: ConnectionManager, name: str) -> PlaylistRow | None:
    try:
        with db.session() as conn:
            r = conn.execute("SELECT id, name FROM playlists WHERE name = ?", (name,)).fetchone()
    except (sqlite3.Error, MoodMusicError):
        logger.exception(f"Failed to load playlist '{name}'")
        return None
    return PlaylistRow(id=r[0], name=r[1]) if r else None


def add_song_to_playlist(db: ConnectionManager, playlist_id: int, song_id: int) -> bool:
    """
    Add a song to a playlist. Re-adding an existing pair is a no-op.
    Returns True if a row was inserted. Failures (e.g. unknown ids) are logged, not raised.
    """
    try:
        with db.transaction() as conn:
            cur = conn.execute(
                "INSERT OR IGNORE INTO playlist_songs (playlist_id, song_id) VALUES (?, ?)",
                (playlist_id, song_id),
            )
            return cur.rowcount == 1
    except (sqlite3.Error, MoodMusicError):
        logger.exception(f"Failed to add song {song_id} to playlist {playlist_id}")
        return False


def add_song_to_playlist_by_name(db: ConnectionManager, playlist_name: str, song_id: int) -> bool:
    """Create the playlist if needed, then add the song."""
    pid = create_playlist(db, playlist_name)
    if pid == PLAYLIST_ERROR:
        return False
    return add_song_to_playlist(db, pid, song_id)


def get_all_playlist_names(db: ConnectionManager) -> list[str]:
    """Playlist names in alphabetical order."""
    try:
        with db.session() as conn:
            cur = conn.execute("SELECT name FROM playlists ORDER BY name")
            return [r[0] for r in cur.fetchall()]
    except (sqlite3.Error, MoodMusicError):
        logger.exception("Failed to load playlist names")
        return []


def get_songs_for_playlist(db: ConnectionManager, playlist_name: str) -> list[SongRow]:
    """Songs in the named playlist, ordered by song id. Unknown playlist -> []."""
    try:
        with db.session() as conn:
            cur = conn.execute(
                """SELECT s.id, s.title, s.artist, s.mood, s.path
                   FROM songs s
                   JOIN playlist_songs ps ON s.id = ps.song_id
                   JOIN playlists p ON p.id = ps.playlist_id
                   WHERE p.name = ? ORDER BY s.id""",
                (playlist_name,),
            )
            return [SongRow(id=r[0], title=r[1], artist=r[2], mood=r[3], path=r[4] or "") for r in cur.fetchall()]
    except (sqlite3.Error, MoodMusicError):
        logger.exception(f"Failed to load songs for playlist '{playlist_name}'")
        return []


def count_playlist_songs(db: ConnectionManager, playlist_name: str) -> int:
    try:
        with db.session() as conn:
            cur = conn.execute(
                """SELECT COUNT(*) FROM playlist_songs ps
                   JOIN playlists p ON p.id = ps.playlist_id WHERE p.name = ?""",
                (playlist_name,),
            )
            return cur.fetchone()[0]
    except (sqlite3.Error, MoodMusicError):
        logger.exception(f"Failed to count songs for playlist '{playlist_name}'")
        return 0


def _playlist_member_ids(db: ConnectionManager, playlist_id: int) -> set[int]:
    try:
        with db.session() as conn:
            cur = conn.execute("SELECT song_id FROM playlist_songs WHERE playlist_id = ?", (playlist_id,))
            return {r[0] for r in cur.fetchall()}
    except (sqlite3.Error, MoodMusicError):
        logger.exception(f"Failed to load members of playlist {playlist_id}")
        return set()


def mood_playlist_name(mood: str, now: datetime | None = None) -> str:
    """e.g. 'Happy_playlist_20260118_0930'."""
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M")
    return f"{mood}_playlist_{stamp}"


def generate_mood_playlist(db: ConnectionManager, mood: str, now: datetime | None = None) -> MoodPlaylistResult:
    """
    Create '<Mood>_playlist_<timestamp>' and fill it with every song of that mood.
    The playlist is created even when no song matches; check result.is_empty.
    Raises RepositoryError if the playlist itself cannot be created.
    """
    mood = normalize_mood(mood)
    name = mood_playlist_name(mood, now)
    with db.lock:
        pid = create_playlist(db, name)
        if pid == PLAYLIST_ERROR:
            raise RepositoryError(f"Could not create playlist '{name}'")
        matched = find_song_ids_by_mood(db, mood)
        for song_id in matched:
            add_song_to_playlist(db, pid, song_id)
        members = _playlist_member_ids(db, pid)
    # Only ids that actually ended up in the playlist; failed adds are already logged.
    song_ids = [song_id for song_id in matched if song_id in members]
    if len(song_ids) < len(matched):
        logger.warning(f"Playlist '{name}': {len(matched) - len(song_ids)} of {len(matched)} {mood} songs could not be added")
    if song_ids:
        logger.info(f"Created playlist '{name}' with {len(song_ids)} {mood} songs")
    else:
        logger.info(f"No songs found for mood {mood}; playlist '{name}' left empty")
    return MoodPlaylistResult(playlist_id=pid, name=name, song_ids=song_ids)
