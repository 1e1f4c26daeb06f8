#!/usr/bin/env python3
"""
Basic Usage Example - Pacer Interval Workout Engine

This script demonstrates the basic usage of the Pacer engine with a simulated
clock, so a ten minute workout finishes in well under a second. It shows how to:
- Initialize the engine with a throwaway database
- Import plans in both supported JSON schemas
- Run a session with pause, resume and a host suspension
- Receive announcements on stdout and through a callback

Run: python examples/basic_usage.py
"""

import json
import sys
import tempfile
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pacer_app.clock.interval_clock import IntervalClock
from pacer_app.delivery import CallbackEventDelivery, StdoutEventDelivery
from pacer_app.engine import WorkoutEngine
from pacer_app.errors import DuplicatePlanName, ValidationError
from pacer_app.logging import configure_logging
from pacer_app.state.models import SessionEvent


class SimulatedTime:
    """Time source advanced by the example instead of the wall clock."""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


SIMPLE_PLAN = {
    "name": "Quick Intervals",
    "totalDuration": 180,
    "intervals": [
        {"timestamp": 0, "speed": 6.0, "incline": 1.0},
        {"timestamp": 60, "speed": 10.0, "incline": 1.0},
        {"timestamp": 120, "speed": 6.5, "incline": 0.0},
    ],
}

STEP_PLAN = {
    "name": "Ten Minute Hill",
    "total_duration_minutes": 10,
    "steps": [
        {"start_min": 0, "end_min": 3, "speed_mph": 3.0, "incline_percent": 2},
        {"start_min": 3, "end_min": 7, "speed_mph": [3.4, 3.6], "incline_percent": 8},
        {"start_min": 7, "end_min": 10, "speed_mph": 2.8, "incline_percent": 0},
    ],
}


def import_plans(engine: WorkoutEngine) -> None:
    """Import both example plans and show rejected input."""
    print("📥 Importing plans...")
    for raw in (SIMPLE_PLAN, STEP_PLAN):
        plan = engine.import_plan(json.dumps(raw))
        print(f"  ✅ {plan.name}: {plan.interval_count} intervals, "
              f"{plan.total_duration_seconds:.0f}s")

    try:
        engine.import_plan(SIMPLE_PLAN)
    except DuplicatePlanName as e:
        print(f"  ⏭️  {e}")

    try:
        engine.import_plan({"name": "Broken", "intervals": [{"timestamp": 5, "speed": 4, "incline": 0}]})
    except ValidationError as e:
        print(f"  ❌ Rejected: {e}")


def run_workout(engine: WorkoutEngine) -> None:
    """Run the step plan with a simulated clock."""
    plan = next(p for p in engine.list_plans() if p.name == "Ten Minute Hill")
    time_source = SimulatedTime()
    changes = []

    def on_event(event: SessionEvent) -> None:
        if event.event_type.value == "interval_changed":
            changes.append(event.index)

    session = engine.create_session(
        plan,
        sinks=[StdoutEventDelivery(), CallbackEventDelivery(on_event)],
        clock=IntervalClock(now=time_source),
    )

    print(f"\n🏃 Starting '{plan.name}'")
    session.start()

    while not session.phase.is_terminal:
        session.tick()
        time_source.now += 0.5

        if 100.0 <= session.elapsed < 100.5:
            print("  ⏸️  Pausing for a drink")
            session.pause()
            time_source.now += 45
            session.resume()
        elif 250.0 <= session.elapsed < 250.5:
            print("  💤 Device slept for 30s")
            session.report_suspension_gap(30)

    print(f"\n🏁 Finished in phase {session.phase.value}, intervals seen: {changes}")


def main():
    configure_logging(level="WARNING")

    with tempfile.TemporaryDirectory() as tmp:
        engine = WorkoutEngine(
            config_dir=tmp,
            overrides={"storage": {"db_path": str(Path(tmp) / "plans.db")}},
        )
        import_plans(engine)
        run_workout(engine)


if __name__ == "__main__":
    main()
