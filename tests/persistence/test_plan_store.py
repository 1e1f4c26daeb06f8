"""Tests for plan persistence layer."""

import sqlite3
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from pacer_app.data.models import Interval, Plan
from pacer_app.errors import DuplicatePlanName, PersistenceError
from pacer_app.persistence.plan_store import InMemoryPlanStore, PlanRepository, SqlitePlanStore


def make_plan(name: str, created_at: datetime) -> Plan:
    return Plan(
        name=name,
        total_duration_seconds=120.0,
        intervals=(
            Interval(timestamp_seconds=0.0, speed_kmh=4.828, incline_percent=1.5),
            Interval(timestamp_seconds=60.0, speed_kmh=6.4, incline_percent=3.0),
        ),
        created_at=created_at,
    )


@pytest.fixture
def sqlite_store(tmp_path):
    return SqlitePlanStore(str(tmp_path / "plans.db"))


@pytest.fixture(params=["sqlite", "memory"])
def store(request, tmp_path) -> PlanRepository:
    """Every repository implementation honours the same contract."""
    if request.param == "sqlite":
        return SqlitePlanStore(str(tmp_path / "plans.db"))
    return InMemoryPlanStore()


class TestPlanRepositoryContract:
    """Behaviour shared by all plan repositories."""

    def test_save_and_load(self, store, sample_plan):
        store.save(sample_plan)
        loaded = store.load(sample_plan.id)

        assert loaded == sample_plan

    def test_load_unknown_returns_none(self, store):
        assert store.load("missing-id") is None

    def test_exists_matches_exact_name(self, store, sample_plan):
        store.save(sample_plan)
        assert store.exists("Short Test Plan") is True
        assert store.exists("short test plan") is False
        assert store.exists("Other") is False

    def test_load_all_newest_first(self, store):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        older = make_plan("Older", base)
        newer = make_plan("Newer", base + timedelta(days=1))
        store.save(older)
        store.save(newer)

        assert [plan.name for plan in store.load_all()] == ["Newer", "Older"]

    def test_delete(self, store, sample_plan):
        store.save(sample_plan)
        store.delete(sample_plan.id)

        assert store.load(sample_plan.id) is None
        assert store.exists(sample_plan.name) is False

    def test_delete_unknown_is_noop(self, store):
        store.delete("missing-id")
        assert store.load_all() == []

    def test_save_same_id_replaces(self, store, sample_plan):
        store.save(sample_plan)
        store.save(sample_plan)
        assert len(store.load_all()) == 1

    def test_save_rejects_name_used_by_other_plan(self, store):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        first = make_plan("Same Name", base)
        second = make_plan("Same Name", base + timedelta(hours=1))
        store.save(first)

        with pytest.raises(DuplicatePlanName) as exc_info:
            store.save(second)

        assert exc_info.value.name == "Same Name"
        assert store.load_all() == [first]


class TestSqlitePlanStore:
    """SQLite specific behaviour."""

    def test_round_trip_preserves_fields(self, sqlite_store):
        plan = make_plan("Round Trip", datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc))
        sqlite_store.save(plan)

        loaded = sqlite_store.load(plan.id)
        assert loaded.id == plan.id
        assert loaded.name == plan.name
        assert loaded.total_duration_seconds == plan.total_duration_seconds
        assert loaded.intervals == plan.intervals
        assert loaded.created_at == plan.created_at

    def test_persists_across_instances(self, tmp_path, sample_plan):
        db_path = str(tmp_path / "plans.db")
        SqlitePlanStore(db_path).save(sample_plan)

        assert SqlitePlanStore(db_path).exists(sample_plan.name)

    def test_creates_parent_directories(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "plans.db"
        SqlitePlanStore(str(db_path))
        assert db_path.exists()

    def test_database_errors_wrapped(self, sqlite_store, sample_plan):
        """sqlite failures surface once as PersistenceError with the cause chained."""
        with patch("pacer_app.persistence.plan_store.sqlite3.connect",
                   side_effect=sqlite3.OperationalError("disk I/O error")):
            with pytest.raises(PersistenceError) as exc_info:
                sqlite_store.save(sample_plan)

        assert exc_info.value.operation == "save"
        assert exc_info.value.target == str(sqlite_store.db_path)
        assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)

    def test_unwritable_location(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(PersistenceError):
            SqlitePlanStore(str(blocker / "plans.db"))
