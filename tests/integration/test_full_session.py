"""Integration tests for plan import through a complete workout session."""

import io
import json

import pytest

from pacer_app.clock.interval_clock import IntervalClock
from pacer_app.delivery import CallbackEventDelivery, FileEventDelivery, StdoutEventDelivery
from pacer_app.engine import WorkoutEngine
from pacer_app.state.models import (
    IntervalChanged,
    SessionPhase,
    UpcomingWarning,
    WorkoutCompleted,
)


@pytest.fixture
def engine(tmp_path):
    return WorkoutEngine(
        config_dir=str(tmp_path),
        overrides={"storage": {"db_path": str(tmp_path / "plans.db")}},
    )


def drive(session, fake_time, seconds, step=0.1):
    """Tick a session while advancing fake time."""
    events = []
    for _ in range(int(seconds / step)):
        events.extend(session.tick())
        fake_time.advance(step)
    return events


@pytest.mark.integration
class TestFullSession:
    """End-to-end runs with a deterministic clock."""

    def test_step_plan_full_run(self, engine, step_plan_data, fake_time, tmp_path):
        """Import a step plan, run it with pauses and a suspension, and check the log."""
        plan = engine.import_plan(json.dumps(step_plan_data))
        stored = engine.get_plan(plan.id)
        log_path = tmp_path / "events.jsonl"
        stream = io.StringIO()
        received = []

        session = engine.create_session(
            stored,
            sinks=[
                StdoutEventDelivery(stream=stream),
                FileEventDelivery(log_path, extra_fields={"plan_name": stored.name}),
                CallbackEventDelivery(received.append),
            ],
            clock=IntervalClock(now=fake_time),
        )

        session.start()
        drive(session, fake_time, 120)
        session.pause()
        fake_time.advance(900)
        assert session.tick() == []
        session.resume()
        drive(session, fake_time, 100)

        # Host slept for a minute; the monotonic source did not advance
        session.report_suspension_gap(60)
        assert session.tick() == []
        assert session.elapsed == pytest.approx(280)
        drive(session, fake_time, 400)

        assert session.phase == SessionPhase.COMPLETED

        kinds = [type(event) for event in received]
        assert kinds.count(IntervalChanged) == 2
        assert kinds.count(UpcomingWarning) == 1
        assert kinds.count(WorkoutCompleted) == 1
        assert received[-1].elapsed >= 600

        warning = next(e for e in received if isinstance(e, UpcomingWarning))
        change = [e for e in received if isinstance(e, IntervalChanged)][1]
        assert warning.elapsed < change.elapsed

        records = [json.loads(line) for line in log_path.read_text().splitlines()]
        assert len(records) == len(received)
        assert {r["plan_name"] for r in records} == {"Incline Walk"}

        output = stream.getvalue()
        assert "Change now. Speed 5.6 kilometers per hour, incline 6.0 percent" in output
        assert output.rstrip().endswith("Workout complete. Great job!")

    def test_suspension_gap_skips_ahead(self, engine, simple_plan_data, fake_time):
        """Elapsed time includes the suspended period once it is reported."""
        plan = engine.import_plan(simple_plan_data)
        received = []
        session = engine.create_session(
            plan,
            sinks=[CallbackEventDelivery(received.append)],
            clock=IntervalClock(now=fake_time),
        )

        session.start()
        session.tick()
        fake_time.advance(30)
        session.report_suspension_gap(100)
        session.tick()

        assert session.elapsed == pytest.approx(130)
        changes = [e.index for e in received if isinstance(e, IntervalChanged)]
        assert changes == [0, 2]

    def test_stop_mid_workout(self, engine, simple_plan_data, fake_time):
        plan = engine.import_plan(simple_plan_data)
        received = []
        session = engine.create_session(
            plan,
            sinks=[CallbackEventDelivery(received.append)],
            clock=IntervalClock(now=fake_time),
        )

        session.start()
        drive(session, fake_time, 70)
        session.stop()
        drive(session, fake_time, 400)

        assert session.phase == SessionPhase.STOPPED
        assert not any(isinstance(e, WorkoutCompleted) for e in received)

    def test_bundled_plan_runs_to_completion(self, engine, fake_time):
        engine.initialize()
        plan = engine.list_plans()[0]
        received = []
        session = engine.create_session(
            plan,
            sinks=[CallbackEventDelivery(received.append)],
            clock=IntervalClock(now=fake_time),
        )

        session.start()
        drive(session, fake_time, plan.total_duration_seconds + 2, step=0.5)

        changes = [e.index for e in received if isinstance(e, IntervalChanged)]
        assert changes == list(range(plan.interval_count))
        assert isinstance(received[-1], WorkoutCompleted)
