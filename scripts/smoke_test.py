#!/usr/bin/env python3
"""Smoke checks for an installed Pacer engine.

Imports one plan in each schema into a throwaway database, then drives a
session on a simulated clock and checks the announcements it produces.
Exits with status 0 when every check passes and 1 otherwise.

Usage:
    python scripts/smoke_test.py
"""

import sys
import tempfile
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pacer_app.clock.interval_clock import IntervalClock
from pacer_app.delivery import CallbackEventDelivery
from pacer_app.engine import WorkoutEngine
from pacer_app.errors import DuplicatePlanName
from pacer_app.logging import configure_logging
from pacer_app.state.models import EventType, SessionPhase

SIMPLE_PLAN = {
    "name": "Smoke Simple",
    "totalDuration": 30,
    "intervals": [
        {"timestamp": 0, "speed": 5.0, "incline": 1.0},
        {"timestamp": 10, "speed": 8.0, "incline": 2.0},
        {"timestamp": 20, "speed": 6.0, "incline": 0.0},
    ],
}

STEP_PLAN = {
    "name": "Smoke Step",
    "total_duration_minutes": 2,
    "steps": [
        {"start_min": 0, "end_min": 1, "speed_mph": 3.0, "incline_percent": 2},
        {"start_min": 1, "end_min": 2, "speed_mph": [3.5, 4.0], "incline_percent": 6},
    ],
}


class SimulatedTime:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def check_imports(engine: WorkoutEngine) -> list[str]:
    failures = []
    simple = engine.import_plan(SIMPLE_PLAN)
    step = engine.import_plan(STEP_PLAN)

    if simple.interval_count != 3:
        failures.append(f"simple plan has {simple.interval_count} intervals, expected 3")
    if step.total_duration_seconds != 120:
        failures.append(f"step plan lasts {step.total_duration_seconds}s, expected 120s")
    if {plan.name for plan in engine.list_plans()} != {"Smoke Step", "Smoke Simple"}:
        failures.append("stored plans do not match the imported plans")

    try:
        engine.import_plan(SIMPLE_PLAN)
        failures.append("duplicate plan name was accepted")
    except DuplicatePlanName:
        pass

    return failures


def check_session(engine: WorkoutEngine) -> list[str]:
    failures = []
    plan = next(p for p in engine.list_plans() if p.name == "Smoke Simple")
    time_source = SimulatedTime()
    received = []

    session = engine.create_session(
        plan,
        sinks=[CallbackEventDelivery(received.append)],
        clock=IntervalClock(now=time_source),
    )
    session.start()
    while not session.phase.is_terminal and time_source.now < 60:
        session.tick()
        time_source.now += 0.5

    counts = {event_type: 0 for event_type in EventType}
    for event in received:
        counts[event.event_type] += 1

    if session.phase != SessionPhase.COMPLETED:
        failures.append(f"session ended in phase {session.phase.value}")
    if counts[EventType.INTERVAL_CHANGED] != 3:
        failures.append(f"{counts[EventType.INTERVAL_CHANGED]} interval changes, expected 3")
    if counts[EventType.UPCOMING_WARNING] != 2:
        failures.append(f"{counts[EventType.UPCOMING_WARNING]} warnings, expected 2")
    if counts[EventType.COMPLETED] != 1:
        failures.append(f"{counts[EventType.COMPLETED]} completions, expected 1")

    return failures


def main() -> None:
    configure_logging(level="WARNING")
    print("🧪 Pacer smoke checks")
    print("=" * 60)

    failures = []
    with tempfile.TemporaryDirectory() as tmp:
        engine = WorkoutEngine(
            config_dir=tmp,
            overrides={"storage": {"db_path": str(Path(tmp) / "plans.db")}},
        )
        for name, check in (("Plan import", check_imports), ("Session events", check_session)):
            problems = check(engine)
            status = "✅" if not problems else "❌"
            print(f"{status} {name}")
            for problem in problems:
                print(f"  • {problem}")
            failures.extend(problems)

    if failures:
        print(f"\n⚠️  {len(failures)} smoke check(s) failed")
        sys.exit(1)
    print("\n🎉 All smoke checks passed!")
    sys.exit(0)


if __name__ == "__main__":
    main()
