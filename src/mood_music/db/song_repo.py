"""
Song CRUD and mood queries.

Reads never raise: on a storage or connectivity failure they log and return an empty result,
so the library view can always render. Writes raise.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

from loguru import logger

from ..errors import MoodMusicError, RepositoryError, SongNotFound, ValidationError
from ..moods import is_all_moods, normalize_mood
from .connection import ConnectionManager

_SONG_COLUMNS = "id, title, artist, mood, path"


@dataclass
class SongRow:
    id: int
    title: str
    artist: str
    mood: str
    path: str


def _row_to_song(r: tuple) -> SongRow:
    return SongRow(id=r[0], title=r[1], artist=r[2], mood=r[3], path=r[4] or "")


def _clean_fields(title: str | None, artist: str | None, mood: str | None, path: str | None) -> tuple[str, str, str, str]:
    title = (title or "").strip()
    artist = (artist or "").strip()
    if not title:
        raise ValidationError("Title cannot be empty")
    if not artist:
        raise ValidationError("Artist cannot be empty")
    return title, artist, normalize_mood(mood), (path or "").strip()


def get_all_songs(db: ConnectionManager) -> list[SongRow]:
    """All songs ordered by id."""
    try:
        with db.session() as conn:
            cur = conn.execute(f"SELECT {_SONG_COLUMNS} FROM songs ORDER BY id")
            return [_row_to_song(r) for r in cur.fetchall()]
    except (sqlite3.Error, MoodMusicError):
        logger.exception("Failed to load songs")
        return []


def get_songs_by_mood(db: ConnectionManager, mood: str) -> list[SongRow]:
    """Songs whose mood equals `mood` exactly, ordered by id."""
    try:
        with db.session() as conn:
            cur = conn.execute(
                f"SELECT {_SONG_COLUMNS} FROM songs WHERE mood = ? ORDER BY id",
                (mood,),
            )
            return [_row_to_song(r) for r in cur.fetchall()]
    except (sqlite3.Error, MoodMusicError):
        logger.exception(f"Failed to load songs for mood {mood!r}")
        return []


def list_songs(db: ConnectionManager, mood: str | None = None) -> list[SongRow]:
    """Library filter: None or 'All' returns every song, anything else filters by mood."""
    if is_all_moods(mood):
        return get_all_songs(db)
    return get_songs_by_mood(db, mood)


def get_song(db: ConnectionManager, song_id: int) -> SongRow | None:
    try:
        with db.session() as conn:
            cur = conn.execute(f"SELECT {_SONG_COLUMNS} FROM songs WHERE id = ?", (song_id,))
            r = cur.fetchone()
    except (sqlite3.Error, MoodMusicError):
        logger.exception(f"Failed to load song {song_id}")
        return None
    return _row_to_song(r) if r else None


def find_song_ids_by_mood(db: ConnectionManager, mood: str) -> list[int]:
    """Ids of songs matching `mood` case-insensitively, ordered by title."""
    try:
        with db.session() as conn:
            cur = conn.execute(
                "SELECT id FROM songs WHERE LOWER(mood) = LOWER(?) ORDER BY title, id",
                ((mood or "").strip(),),
            )
            return [r[0] for r in cur.fetchall()]
    except (sqlite3.Error, MoodMusicError):
        logger.exception(f"Error finding songs for mood: {mood}")
        return []


def insert_song(
    db: ConnectionManager,
    title: str,
    artist: str,
    mood: str,
    path: str | None = "",
) -> int:
    """
    Insert a song and return its generated id. Title and artist are trimmed and must be
    non-empty; mood must be one of MOODS (any case). Path defaults to '' (no media).
    """
    title, artist, mood, path = _clean_fields(title, artist, mood, path)
    with db.transaction() as conn:
        cur = conn.execute(
            "INSERT INTO songs (title, artist, mood, path) VALUES (?, ?, ?, ?)",
            (title, artist, mood, path),
        )
        if cur.rowcount != 1 or not cur.lastrowid:
            raise RepositoryError("Failed to insert song")
        song_id = cur.lastrowid
    logger.info(f"Added song {song_id}: {title} / {artist} ({mood})")
    return song_id


def update_song(
    db: ConnectionManager,
    song_id: int,
    title: str,
    artist: str,
    mood: str,
    path: str | None = "",
) -> None:
    """Replace every field of an existing song. Raises SongNotFound if the id is unknown."""
    title, artist, mood, path = _clean_fields(title, artist, mood, path)
    with db.transaction() as conn:
        cur = conn.execute(
            "UPDATE songs SET title = ?, artist = ?, mood = ?, path = ? WHERE id = ?",
            (title, artist, mood, path, song_id),
        )
        if cur.rowcount == 0:
            raise SongNotFound(song_id)
    logger.info(f"Updated song {song_id}")


def delete_song(db: ConnectionManager, song_id: int) -> None:
    """Delete a song; its playlist memberships go with it (ON DELETE CASCADE)."""
    with db.transaction() as conn:
        cur = conn.execute("DELETE FROM songs WHERE id = ?", (song_id,))
        if cur.rowcount == 0:
            raise SongNotFound(song_id)
    logger.info(f"Deleted song {song_id}")


def count_songs(db: ConnectionManager) -> int:
    with db.session() as conn:
        return conn.execute("SELECT COUNT(*) FROM songs").fetchone()[0]
