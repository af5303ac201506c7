"""
Connection manager: owns the single SQLite connection for the process.

Callers either get a live, configured connection or an exception, never a stale handle.
All connection mutation and every unit of work run under one re-entrant lock.
"""

from __future__ import annotations

import sqlite3
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, TypeVar

from loguru import logger

from ..errors import ConnectivityError, MoodMusicError, RetryInterrupted

T = TypeVar("T")

# Applied to every freshly opened connection.
CONNECTION_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA cache_size=2000",
    "PRAGMA mmap_size=268435456",  # 256 MiB
    "PRAGMA foreign_keys=ON",
)

CONNECT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry with a fixed delay between attempts.
    `sleep` is injectable so tests can run without waiting.
    """

    attempts: int = 3
    delay: float = 1.0
    sleep: Callable[[float], None] = time.sleep
    retry_on: tuple[type[BaseException], ...] = (sqlite3.Error, OSError)

    def run(
        self,
        fn: Callable[[], T],
        what: str,
        error: type[MoodMusicError] = MoodMusicError,
    ) -> T:
        """
        Call fn until it succeeds or attempts are exhausted.
        Exhaustion raises `error` chained to the last failure. KeyboardInterrupt during the
        sleep raises RetryInterrupted.
        """
        last_exc: BaseException | None = None
        for attempt in range(1, self.attempts + 1):
            try:
                return fn()
            except self.retry_on as exc:
                last_exc = exc
                if attempt == self.attempts:
                    break
                logger.warning(f"{what} failed (attempt {attempt}/{self.attempts}): {exc}; retrying in {self.delay}s")
                try:
                    self.sleep(self.delay)
                except KeyboardInterrupt as interrupt:
                    raise RetryInterrupted(f"Interrupted while retrying {what}") from interrupt
        logger.error(f"{what} failed after {self.attempts} attempts: {last_exc}")
        raise error(f"{what} failed after {self.attempts} attempts") from last_exc


class ConnectionManager:
    """
    Connection pool of one. Repository functions take this object, not a raw connection,
    and do their work inside session() or transaction().
    """

    def __init__(
        self,
        db_path: Path | str,
        *,
        retry: RetryPolicy | None = None,
        connect_timeout: float = CONNECT_TIMEOUT_SECONDS,
    ) -> None:
        self.db_path = Path(db_path)
        self.retry = retry or RetryPolicy()
        self.connect_timeout = connect_timeout
        self._lock = threading.RLock()
        self._conn: sqlite3.Connection | None = None

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def _ping(self, conn: sqlite3.Connection) -> None:
        """Trivial query; raises sqlite3.Error if the handle is dead."""
        conn.execute("SELECT 1").fetchone()

    def _discard(self) -> None:
        if self._conn is None:
            return
        try:
            self._conn.close()
        except sqlite3.Error:
            logger.debug("Ignoring error while closing stale connection")
        finally:
            self._conn = None

    def _open(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        # isolation_level=None: transactions are explicit (BEGIN/COMMIT), never implicit.
        conn = sqlite3.connect(
            str(self.db_path),
            timeout=self.connect_timeout,
            isolation_level=None,
            check_same_thread=False,
        )
        try:
            for pragma in CONNECTION_PRAGMAS:
                conn.execute(pragma)
        except sqlite3.Error:
            conn.close()
            raise
        logger.debug(f"Opened database connection: {self.db_path}")
        return conn

    def ensure_connection(self) -> sqlite3.Connection:
        """
        Return the cached connection if it answers a liveness check; otherwise discard it and open a
        new, fully configured one. Raises sqlite3.Error / OSError on failure (no retry here).
        """
        with self._lock:
            if self._conn is not None:
                try:
                    self._ping(self._conn)
                    return self._conn
                except sqlite3.Error as exc:
                    logger.warning(f"Connection check failed, reopening: {exc}")
                self._discard()
            self._conn = self._open()
            return self._conn

    def _checked_connection(self) -> sqlite3.Connection:
        conn = self.ensure_connection()
        self._ping(conn)
        return conn

    def get_connection(self) -> sqlite3.Connection:
        """Live connection, retried per the retry policy. Raises ConnectivityError when exhausted."""
        with self._lock:
            return self.retry.run(self._checked_connection, "Database connection", error=ConnectivityError)

    @contextmanager
    def session(self) -> Iterator[sqlite3.Connection]:
        """Hold the lock for one unit of work; statements autocommit."""
        with self._lock:
            yield self.get_connection()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Hold the lock and wrap the block in BEGIN/COMMIT, rolling back on any exception."""
        with self._lock:
            conn = self.get_connection()
            conn.execute("BEGIN")
            try:
                yield conn
                conn.execute("COMMIT")
            except BaseException:
                # A failed COMMIT leaves the transaction open; it must not leak to the next caller.
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise

    def close(self) -> None:
        """Close the connection. Idempotent; safe from an exit hook."""
        with self._lock:
            if self._conn is None:
                return
            try:
                if self._conn.in_transaction:
                    logger.warning("Rolling back unfinished transaction on close")
                    self._conn.rollback()
                self._conn.close()
                logger.debug(f"Closed database connection: {self.db_path}")
            except sqlite3.Error as exc:
                logger.warning(f"Error closing database connection: {exc}")
            finally:
                self._conn = None

    def __enter__(self) -> ConnectionManager:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
