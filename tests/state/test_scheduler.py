"""Tests for interval lookup and per-tick event evaluation."""

import pytest

from pacer_app.data.models import Interval, Plan
from pacer_app.state.models import (
    IntervalChanged,
    SessionPhase,
    SessionState,
    UpcomingWarning,
    WorkoutCompleted,
)
from pacer_app.state.scheduler import (
    IntervalScheduler,
    current_interval,
    current_interval_index,
    upcoming_interval,
    upcoming_interval_index,
)


def active_state() -> SessionState:
    return SessionState(phase=SessionPhase.ACTIVE)


def run_ticks(scheduler, plan, times, state=None):
    """Feed a sequence of elapsed times through the scheduler."""
    state = state or active_state()
    all_events = []
    for t in times:
        state, events = scheduler.on_tick(plan, t, state)
        all_events.extend(events)
    return state, all_events


class TestCurrentInterval:
    """Test current interval lookup."""

    @pytest.mark.parametrize("t,expected", [
        (0.0, 0),
        (9.99, 0),
        (10.0, 1),
        (15.0, 1),
        (20.0, 2),
        (500.0, 2),
    ])
    def test_last_interval_at_or_before_t(self, sample_plan, t, expected):
        assert current_interval_index(sample_plan, t) == expected
        assert current_interval(sample_plan, t) is sample_plan.intervals[expected]

    def test_before_first_interval_returns_first(self, sample_plan):
        assert current_interval_index(sample_plan, -1.0) == 0

    def test_equal_timestamps_pick_the_last(self):
        plan = Plan(
            name="Dupes",
            total_duration_seconds=30,
            intervals=(Interval(0, 5, 0), Interval(10, 6, 0), Interval(10, 7, 0)),
        )
        assert current_interval(plan, 10).speed_kmh == 7


class TestUpcomingInterval:
    """Test upcoming interval lookup within the warning window."""

    def test_inside_window(self, sample_plan):
        assert upcoming_interval_index(sample_plan, 5.0) == 1
        assert upcoming_interval(sample_plan, 6.0) is sample_plan.intervals[1]

    def test_window_boundaries(self, sample_plan):
        """The window is open at t and closed at t + window."""
        assert upcoming_interval_index(sample_plan, 4.99) is None
        assert upcoming_interval_index(sample_plan, 10.0) is None
        assert upcoming_interval_index(sample_plan, 15.0) == 2

    def test_nothing_after_last_interval(self, sample_plan):
        assert upcoming_interval(sample_plan, 25.0) is None

    def test_custom_window(self, sample_plan):
        assert upcoming_interval_index(sample_plan, 0.0, window=10.0) == 1
        assert upcoming_interval_index(sample_plan, 0.0, window=1.0) is None


class TestOnTick:
    """Test event emission rules."""

    def test_first_tick_signals_first_interval(self, sample_plan):
        state, events = IntervalScheduler().on_tick(sample_plan, 0.0, active_state())

        assert events == [IntervalChanged(index=0, interval=sample_plan.intervals[0], elapsed=0.0)]
        assert state.last_signaled_interval_index == 0
        assert state.current_interval_index == 0

    def test_interval_changed_exactly_once(self, sample_plan):
        """Many ticks inside one interval produce a single change event."""
        times = [i * 0.1 for i in range(0, 200)]
        _, events = run_ticks(IntervalScheduler(), sample_plan, times)

        changes = [e.index for e in events if isinstance(e, IntervalChanged)]
        assert changes == [0, 1]

    def test_warning_once_before_change(self, sample_plan):
        times = [i * 0.1 for i in range(0, 120)]
        _, events = run_ticks(IntervalScheduler(), sample_plan, times)

        warnings = [e for e in events if isinstance(e, UpcomingWarning)]
        assert [w.index for w in warnings] == [1]
        assert warnings[0].elapsed == pytest.approx(5.0)
        assert warnings[0].seconds_until == pytest.approx(5.0)

    def test_event_order_within_a_tick(self, sample_plan):
        """Change precedes warning precedes completion."""
        plan = Plan(
            name="Tight",
            total_duration_seconds=3.0,
            intervals=(Interval(0, 5, 0), Interval(3, 6, 0)),
        )
        _, events = IntervalScheduler().on_tick(plan, 0.0, active_state())
        assert [type(e) for e in events] == [IntervalChanged, UpcomingWarning]

        state, events = IntervalScheduler().on_tick(
            plan, 3.0, active_state().with_interval_signaled(0).with_warning_fired(1)
        )
        assert [type(e) for e in events] == [IntervalChanged, WorkoutCompleted]
        assert state.phase == SessionPhase.COMPLETED

    def test_completion_fires_once(self, sample_plan):
        times = [28.0, 29.9, 30.0, 30.1, 31.0]
        state, events = run_ticks(IntervalScheduler(), sample_plan, times)

        assert sum(isinstance(e, WorkoutCompleted) for e in events) == 1
        assert state.phase == SessionPhase.COMPLETED

    def test_no_completion_unless_active(self, sample_plan):
        paused = SessionState(phase=SessionPhase.PAUSED)
        state, events = IntervalScheduler().on_tick(sample_plan, 40.0, paused)

        assert not any(isinstance(e, WorkoutCompleted) for e in events)
        assert state.phase == SessionPhase.PAUSED

    def test_large_jump_skips_intermediate_intervals(self, sample_plan):
        """Only the interval at the sampled time is signalled."""
        scheduler = IntervalScheduler()
        state, _ = scheduler.on_tick(sample_plan, 0.0, active_state())
        state, events = scheduler.on_tick(sample_plan, 25.0, state)

        changes = [e.index for e in events if isinstance(e, IntervalChanged)]
        assert changes == [2]

    def test_warning_rearms_after_change(self, sample_plan):
        times = [i * 0.5 for i in range(0, 61)]
        _, events = run_ticks(IntervalScheduler(), sample_plan, times)

        warnings = [e.index for e in events if isinstance(e, UpcomingWarning)]
        assert warnings == [1, 2]

    def test_zero_window_never_warns(self, sample_plan):
        times = [i * 0.5 for i in range(0, 61)]
        _, events = run_ticks(IntervalScheduler(warning_window_seconds=0), sample_plan, times)
        assert not any(isinstance(e, UpcomingWarning) for e in events)

    def test_state_carries_elapsed(self, sample_plan):
        state, _ = IntervalScheduler().on_tick(sample_plan, 12.3, active_state())
        assert state.elapsed == 12.3

    def test_input_state_not_mutated(self, sample_plan):
        original = active_state()
        IntervalScheduler().on_tick(sample_plan, 12.0, original)
        assert original.last_signaled_interval_index is None
        assert original.elapsed == 0.0
