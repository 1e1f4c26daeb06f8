"""Persisted first-launch flag gating the bundled plan import."""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path

import structlog

from ..errors import PersistenceError
from ..utils.time import format_timestamp, utc_now

HAS_RUN_KEY = "has_launched_before"


class LaunchStateStore:
    """
    Single-flag application state kept beside the plan database.

    The flag starts unset. ``mark_run`` sets it once prebuilt plans have been
    imported so later launches skip the import.
    """

    def __init__(self, db_path: str = "plans.db"):
        self.db_path = Path(db_path).expanduser()
        self.logger = structlog.get_logger("launch.state")
        self._lock = threading.Lock()

    def initialize(self) -> None:
        """Create the app_state table if missing."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(
                f"Cannot create state directory: {e}",
                operation="initialize",
                target=str(self.db_path.parent)
            ) from e

        with self._get_connection("initialize") as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS app_state (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    @contextmanager
    def _get_connection(self, operation: str):
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", operation=operation, error=str(e))
            raise PersistenceError(
                f"Launch state {operation} failed: {e}",
                operation=operation,
                target=str(self.db_path)
            ) from e
        finally:
            if conn:
                conn.close()

    def has_run_before(self) -> bool:
        """Whether a previous launch already recorded itself."""
        with self._get_connection("read") as conn:
            row = conn.execute(
                "SELECT value FROM app_state WHERE key = ?",
                (HAS_RUN_KEY,)
            ).fetchone()
        return row is not None and row[0] == "1"

    def mark_run(self) -> None:
        """Record that the application has launched."""
        with self._lock:
            with self._get_connection("mark_run") as conn:
                conn.execute("""
                    INSERT OR REPLACE INTO app_state (key, value, updated_at)
                    VALUES (?, ?, ?)
                """, (HAS_RUN_KEY, "1", format_timestamp(utc_now())))
                conn.commit()

        self.logger.info("First launch recorded")
