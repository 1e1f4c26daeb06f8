"""Plan persistence layer for validated workout plans."""

import json
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import structlog

from ..data.models import Plan
from ..errors import DuplicatePlanName, PersistenceError


class PlanRepository(ABC):
    """Storage interface for validated plans."""

    @abstractmethod
    def save(self, plan: Plan) -> None:
        """
        Store a plan, replacing any plan with the same id.

        Raises:
            DuplicatePlanName: A different plan already uses this name
        """
        pass

    @abstractmethod
    def load_all(self) -> list[Plan]:
        """All stored plans, newest first."""
        pass

    @abstractmethod
    def load(self, plan_id: str) -> Optional[Plan]:
        pass

    @abstractmethod
    def delete(self, plan_id: str) -> None:
        pass

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Whether a plan with exactly this name is stored."""
        pass


class InMemoryPlanStore(PlanRepository):
    """Dictionary-backed store for tests and ephemeral sessions."""

    def __init__(self) -> None:
        self._plans: dict[str, Plan] = {}
        self._lock = threading.Lock()

    def save(self, plan: Plan) -> None:
        with self._lock:
            if any(other.name == plan.name and other.id != plan.id
                   for other in self._plans.values()):
                raise DuplicatePlanName(plan.name, context={'plan_id': plan.id})
            self._plans[plan.id] = plan

    def load_all(self) -> list[Plan]:
        with self._lock:
            plans = list(self._plans.values())
        return sorted(plans, key=lambda plan: plan.created_at, reverse=True)

    def load(self, plan_id: str) -> Optional[Plan]:
        with self._lock:
            return self._plans.get(plan_id)

    def delete(self, plan_id: str) -> None:
        with self._lock:
            self._plans.pop(plan_id, None)

    def exists(self, name: str) -> bool:
        with self._lock:
            return any(plan.name == name for plan in self._plans.values())


class SqlitePlanStore(PlanRepository):
    """SQLite-based plan persistence layer."""

    def __init__(self, db_path: str = "plans.db"):
        self.db_path = Path(db_path).expanduser()
        self.logger = structlog.get_logger("plan.store")
        self._lock = threading.Lock()

        # Create database and tables
        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(
                f"Cannot create plan database directory: {e}",
                operation="init",
                target=str(self.db_path.parent)
            ) from e

        with self._get_connection("init") as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS plans (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    total_duration_seconds REAL NOT NULL,
                    intervals TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE UNIQUE INDEX IF NOT EXISTS idx_plans_name_unique ON plans(name)
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_plans_created_at ON plans(created_at)
            """)

            conn.commit()

    @contextmanager
    def _get_connection(self, operation: str):
        """Get database connection, wrapping sqlite failures once."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", operation=operation, error=str(e))
            raise PersistenceError(
                f"Plan store {operation} failed: {e}",
                operation=operation,
                target=str(self.db_path)
            ) from e
        finally:
            if conn:
                conn.close()

    def save(self, plan: Plan) -> None:
        """
        Store a plan in the database.

        Args:
            plan: Validated plan to store

        Raises:
            DuplicatePlanName: A different plan already uses this name
            PersistenceError: If the database write fails
        """
        record = plan.to_dict()
        with self._lock:
            with self._get_connection("save") as conn:
                try:
                    conn.execute("""
                        INSERT INTO plans (
                            id, name, total_duration_seconds, intervals, created_at
                        ) VALUES (?, ?, ?, ?, ?)
                        ON CONFLICT(id) DO UPDATE SET
                            name = excluded.name,
                            total_duration_seconds = excluded.total_duration_seconds,
                            intervals = excluded.intervals,
                            created_at = excluded.created_at
                    """, (
                        record["id"],
                        record["name"],
                        record["total_duration_seconds"],
                        json.dumps(record["intervals"]),
                        record["created_at"]
                    ))
                except sqlite3.IntegrityError as e:
                    raise DuplicatePlanName(plan.name, context={'plan_id': plan.id}) from e
                conn.commit()

        self.logger.info(
            "Plan stored",
            plan_id=plan.id,
            plan_name=plan.name,
            interval_count=plan.interval_count
        )

    def load_all(self) -> list[Plan]:
        """Get all stored plans, newest first."""
        with self._get_connection("load_all") as conn:
            rows = conn.execute("""
                SELECT * FROM plans ORDER BY created_at DESC
            """).fetchall()

        return [self._row_to_plan(row) for row in rows]

    def load(self, plan_id: str) -> Optional[Plan]:
        """Get a plan by ID."""
        with self._get_connection("load") as conn:
            row = conn.execute("""
                SELECT * FROM plans WHERE id = ?
            """, (plan_id,)).fetchone()

        if row:
            return self._row_to_plan(row)
        return None

    def delete(self, plan_id: str) -> None:
        """Remove a plan. Deleting an unknown id is a no-op."""
        with self._lock:
            with self._get_connection("delete") as conn:
                cursor = conn.execute("""
                    DELETE FROM plans WHERE id = ?
                """, (plan_id,))
                conn.commit()
                deleted = cursor.rowcount

        self.logger.info("Plan deleted", plan_id=plan_id, deleted=deleted)

    def exists(self, name: str) -> bool:
        """Check if a plan with the given name is already stored."""
        with self._get_connection("exists") as conn:
            count = conn.execute("""
                SELECT COUNT(*) FROM plans WHERE name = ?
            """, (name,)).fetchone()[0]

        return count > 0

    def _row_to_plan(self, row: sqlite3.Row) -> Plan:
        """Convert database row to Plan object."""
        return Plan.from_dict({
            "id": row["id"],
            "name": row["name"],
            "total_duration_seconds": row["total_duration_seconds"],
            "intervals": json.loads(row["intervals"]),
            "created_at": row["created_at"],
        })
