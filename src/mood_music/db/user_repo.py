"""
Credential store: user accounts with SHA-256 password digests and an admin flag.
The default admin account is created by the schema initializer (see schema.init_and_seed).
"""

from __future__ import annotations

import hashlib
import sqlite3
from dataclasses import dataclass

from loguru import logger

from ..errors import DuplicateUsername, InvalidCredentials, ValidationError
from .connection import ConnectionManager

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin123"


@dataclass
class UserRow:
    username: str
    is_admin: bool


def hash_password(password: str) -> str:
    """Hex SHA-256 of the UTF-8 password. Unsalted."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def create_users_table(conn: sqlite3.Connection) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS users (
            username TEXT PRIMARY KEY,
            password_hash TEXT NOT NULL,
            is_admin INTEGER NOT NULL DEFAULT 0
        )
    """)


def ensure_default_admin(conn: sqlite3.Connection) -> None:
    """Insert the default admin if missing. Never touches an existing admin row."""
    cur = conn.execute(
        "INSERT OR IGNORE INTO users (username, password_hash, is_admin) VALUES (?, ?, 1)",
        (DEFAULT_ADMIN_USERNAME, hash_password(DEFAULT_ADMIN_PASSWORD)),
    )
    if cur.rowcount:
        logger.info(f"Created default admin account '{DEFAULT_ADMIN_USERNAME}'")


def _require_credentials(username: str | None, password: str | None) -> str:
    name = (username or "").strip()
    if not name or not password:
        raise ValidationError("Please enter both username and password")
    return name


def register(
    db: ConnectionManager,
    username: str,
    password: str,
    confirm: str | None = None,
) -> UserRow:
    """
    Create a non-admin account. Raises ValidationError on empty input or confirmation
    mismatch, DuplicateUsername if the name is taken (existing row is left alone).
    """
    name = _require_credentials(username, password)
    if confirm is not None and confirm != password:
        raise ValidationError("Passwords do not match")
    with db.transaction() as conn:
        try:
            conn.execute(
                "INSERT INTO users (username, password_hash, is_admin) VALUES (?, ?, 0)",
                (name, hash_password(password)),
            )
        except sqlite3.IntegrityError as exc:
            raise DuplicateUsername(name) from exc
    logger.info(f"Registered user '{name}'")
    return UserRow(username=name, is_admin=False)


def authenticate(db: ConnectionManager, username: str, password: str) -> UserRow:
    """Return the account on a matching username/password. Raises InvalidCredentials otherwise."""
    name = _require_credentials(username, password)
    with db.session() as conn:
        cur = conn.execute(
            "SELECT username, is_admin FROM users WHERE username = ? AND password_hash = ?",
            (name, hash_password(password)),
        )
        row = cur.fetchone()
    if row is None:
        logger.info(f"Failed login for '{name}'")
        raise InvalidCredentials()
    return UserRow(username=row[0], is_admin=bool(row[1]))


def user_exists(db: ConnectionManager, username: str) -> bool:
    with db.session() as conn:
        cur = conn.execute("SELECT 1 FROM users WHERE username = ?", (username.strip(),))
        return cur.fetchone() is not None
