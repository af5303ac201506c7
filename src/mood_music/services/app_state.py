"""
App-wide state: the database handle. Single place for UI and services to obtain it.
"""

from __future__ import annotations

import atexit
from pathlib import Path

from loguru import logger

from ..config import get_db_path
from ..db.connection import ConnectionManager, RetryPolicy
from ..db.schema import init_and_seed


class AppState:
    """
    Holds the application's ConnectionManager. Call initialize() at startup and shutdown() on exit;
    both are idempotent. While initialized, shutdown() is also registered as a process-exit hook.
    """

    def __init__(self, db_path: Path | None = None, retry: RetryPolicy | None = None) -> None:
        self._db = ConnectionManager(db_path or get_db_path(), retry=retry)
        self._initialized = False
        self._exit_hook_registered = False
        self._register_exit_hook()

    @property
    def db(self) -> ConnectionManager:
        return self._db

    @property
    def initialized(self) -> bool:
        return self._initialized

    def _register_exit_hook(self) -> None:
        if not self._exit_hook_registered:
            atexit.register(self.shutdown)
            self._exit_hook_registered = True

    def initialize(self) -> None:
        """Create schema and seed data if needed. Raises InitializationError on failure."""
        # A previous shutdown() dropped the hook; a reused state needs it back.
        self._register_exit_hook()
        init_and_seed(self._db)
        self._initialized = True

    def shutdown(self) -> None:
        if self._db.is_open:
            logger.info("Shutting down database connection")
        self._db.close()
        self._initialized = False
        if self._exit_hook_registered:
            atexit.unregister(self.shutdown)
            self._exit_hook_registered = False

    def __enter__(self) -> AppState:
        self.initialize()
        return self

    def __exit__(self, *args: object) -> None:
        self.shutdown()
