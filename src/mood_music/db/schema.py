"""
SQLite schema for Mood Music: songs, playlists, playlist membership, users.

init_and_seed() brings a database from "file may not exist" to "fully usable" inside one
transaction, and is safe to run on every startup.
"""

from __future__ import annotations

import sqlite3

from loguru import logger

from ..errors import InitializationError
from .connection import ConnectionManager
from .user_repo import create_users_table, ensure_default_admin

# Pragmas are not transactional; applied before BEGIN.
INIT_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA busy_timeout=5000",
    "PRAGMA foreign_keys=ON",
)

# (title, artist, mood, path): one per mood, inserted only into an empty songs table.
SAMPLE_SONGS = [
    ("Sunshine Drive", "Neon Roads", "Happy", ""),
    ("Midnight Thought", "Quiet Hour", "Calm", ""),
    ("Run Wild", "Pulse Factory", "Energetic", ""),
    ("Rainy Window", "Soft Echo", "Sad", ""),
    ("Study Focus", "Ambient Labs", "Focus", ""),
]


def create_schema(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes. Idempotent: uses IF NOT EXISTS."""
    conn.execute("""
        CREATE TABLE IF NOT EXISTS songs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            artist TEXT NOT NULL,
            mood TEXT NOT NULL,
            path TEXT NOT NULL DEFAULT ''
        )
    """)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS playlists (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT UNIQUE NOT NULL
        )
    """)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS playlist_songs (
            playlist_id INTEGER NOT NULL,
            song_id INTEGER NOT NULL,
            FOREIGN KEY (playlist_id) REFERENCES playlists (id) ON DELETE CASCADE,
            FOREIGN KEY (song_id) REFERENCES songs (id) ON DELETE CASCADE,
            PRIMARY KEY (playlist_id, song_id)
        )
    """)
    create_users_table(conn)

    conn.execute("CREATE INDEX IF NOT EXISTS idx_songs_mood ON songs (mood)")
    conn.execute("CREATE INDEX IF NOT EXISTS idx_playlist_songs_song ON playlist_songs (song_id)")


def seed_defaults(conn: sqlite3.Connection) -> int:
    """
    Insert SAMPLE_SONGS only when the songs table is empty, so user edits survive restarts.
    Returns the number of rows inserted.
    """
    cur = conn.execute("SELECT COUNT(*) FROM songs")
    if cur.fetchone()[0] > 0:
        return 0
    conn.executemany(
        "INSERT INTO songs (title, artist, mood, path) VALUES (?, ?, ?, ?)",
        SAMPLE_SONGS,
    )
    logger.info(f"Seeded {len(SAMPLE_SONGS)} sample songs")
    return len(SAMPLE_SONGS)


def _init_once(db: ConnectionManager) -> None:
    conn = db.ensure_connection()
    for pragma in INIT_PRAGMAS:
        conn.execute(pragma)
    conn.execute("BEGIN")
    try:
        create_schema(conn)
        seed_defaults(conn)
        ensure_default_admin(conn)
        conn.execute("COMMIT")
    except BaseException:
        if conn.in_transaction:
            try:
                conn.execute("ROLLBACK")
            except sqlite3.Error as exc:
                logger.warning(f"Error during rollback: {exc}")
        raise


def init_and_seed(db: ConnectionManager) -> None:
    """
    Create schema, seed sample songs and the default admin, all in one transaction.
    The whole procedure is retried per db.retry; exhaustion raises InitializationError.
    """
    with db.lock:
        db.retry.run(lambda: _init_once(db), "Database initialization", error=InitializationError)
    logger.info(f"Database ready: {db.db_path}")
