"""Pytest configuration and shared fixtures."""

import pytest
from typing import Any

from pacer_app.data.models import Interval, Plan
from pacer_app.persistence.plan_store import InMemoryPlanStore


class FakeTime:
    """Manually advanced time source for clock and tick loop tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_time() -> FakeTime:
    """Time source starting at an arbitrary non-zero instant."""
    return FakeTime()


@pytest.fixture
def simple_plan_data() -> dict[str, Any]:
    """Simple-format plan with three intervals."""
    return {
        "name": "Hill Sprints",
        "totalDuration": 300,
        "intervals": [
            {"timestamp": 0, "speed": 5.0, "incline": 1.0},
            {"timestamp": 60, "speed": 8.0, "incline": 2.0},
            {"timestamp": 120, "speed": 6.0, "incline": 0.0},
        ],
    }


@pytest.fixture
def step_plan_data() -> dict[str, Any]:
    """Step-format plan in minutes and mph."""
    return {
        "name": "Incline Walk",
        "total_duration_minutes": 10,
        "steps": [
            {"start_min": 0, "end_min": 5, "speed_mph": 3.0, "incline_percent": 2},
            {"start_min": 5, "end_min": 10, "speed_mph": [3.5, 4.0], "incline_percent": [6, 8]},
        ],
    }


@pytest.fixture
def sample_plan() -> Plan:
    """Validated plan: intervals at 0, 10 and 20 seconds, 30 seconds total."""
    return Plan(
        name="Short Test Plan",
        total_duration_seconds=30.0,
        intervals=(
            Interval(timestamp_seconds=0.0, speed_kmh=5.0, incline_percent=1.0),
            Interval(timestamp_seconds=10.0, speed_kmh=8.0, incline_percent=2.0),
            Interval(timestamp_seconds=20.0, speed_kmh=6.0, incline_percent=0.0),
        ),
    )


@pytest.fixture
def memory_store() -> InMemoryPlanStore:
    return InMemoryPlanStore()
