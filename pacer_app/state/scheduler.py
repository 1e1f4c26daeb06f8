"""
Interval scheduling over a canonical plan.

Pure lookup functions map elapsed time to the active and upcoming interval.
The scheduler's tick evaluation reads and returns an immutable SessionState,
which carries the markers that keep every event at-most-once.
"""

from typing import Optional

import structlog

from ..data.models import Interval, Plan
from .models import (
    IntervalChanged,
    SessionEvent,
    SessionPhase,
    SessionState,
    UpcomingWarning,
    WorkoutCompleted,
)

logger = structlog.get_logger(__name__)

DEFAULT_WARNING_WINDOW_SECONDS = 5.0


def current_interval_index(plan: Plan, t: float) -> int:
    """
    Index of the last interval whose timestamp is at or before ``t``.

    Falls back to the first interval when ``t`` precedes every timestamp.
    """
    index = 0
    for i, interval in enumerate(plan.intervals):
        if interval.timestamp_seconds <= t:
            index = i
        else:
            break
    return index


def current_interval(plan: Plan, t: float) -> Interval:
    """Interval active at elapsed time ``t``."""
    return plan.intervals[current_interval_index(plan, t)]


def upcoming_interval_index(
    plan: Plan,
    t: float,
    window: float = DEFAULT_WARNING_WINDOW_SECONDS
) -> Optional[int]:
    """Index of the first interval starting in ``(t, t + window]``, if any."""
    horizon = t + window
    for i, interval in enumerate(plan.intervals):
        if t < interval.timestamp_seconds <= horizon:
            return i
    return None


def upcoming_interval(
    plan: Plan,
    t: float,
    window: float = DEFAULT_WARNING_WINDOW_SECONDS
) -> Optional[Interval]:
    """First interval starting within the warning window after ``t``, if any."""
    index = upcoming_interval_index(plan, t, window)
    return plan.intervals[index] if index is not None else None


class IntervalScheduler:
    """Evaluates one clock sample against a plan and a session state."""

    def __init__(self, warning_window_seconds: float = DEFAULT_WARNING_WINDOW_SECONDS) -> None:
        self.warning_window_seconds = warning_window_seconds

    def on_tick(
        self,
        plan: Plan,
        t: float,
        state: SessionState
    ) -> tuple[SessionState, list[SessionEvent]]:
        """
        Evaluate a single tick.

        Args:
            plan: Validated plan being executed
            t: Elapsed session seconds
            state: Session state before this tick

        Returns:
            Tuple of (new state, events emitted by this tick in order)
        """
        events: list[SessionEvent] = []
        state = state.with_elapsed(t)

        # 1) Interval change
        index = current_interval_index(plan, t)
        if index != state.last_signaled_interval_index:
            interval = plan.intervals[index]
            events.append(IntervalChanged(index=index, interval=interval, elapsed=t))
            state = state.with_interval_signaled(index)
            logger.debug("Interval changed", interval_index=index, elapsed=round(t, 3))

        # 2) Upcoming warning, once per interval
        upcoming = upcoming_interval_index(plan, t, self.warning_window_seconds)
        if upcoming is not None and upcoming != state.warning_already_fired_for_index:
            events.append(UpcomingWarning(
                index=upcoming,
                interval=plan.intervals[upcoming],
                elapsed=t
            ))
            state = state.with_warning_fired(upcoming)
            logger.debug("Upcoming interval warning", interval_index=upcoming, elapsed=round(t, 3))

        # 3) Completion
        if t >= plan.total_duration_seconds and state.phase == SessionPhase.ACTIVE:
            events.append(WorkoutCompleted(elapsed=t))
            state = state.with_phase(SessionPhase.COMPLETED)

        return state, events
