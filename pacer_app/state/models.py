"""
Workout session data models.

This module defines immutable structures for session runtime state and the
events emitted by the interval scheduler.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional, Union

from ..data.models import Interval


class SessionPhase(str, Enum):
    """Workout session lifecycle phases."""
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    STOPPED = "stopped"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionPhase.COMPLETED, SessionPhase.STOPPED)


class EventType(str, Enum):
    """Scheduler event kinds."""
    INTERVAL_CHANGED = "interval_changed"
    UPCOMING_WARNING = "upcoming_warning"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SessionState:
    """Runtime state for a single workout session."""

    phase: SessionPhase = SessionPhase.NOT_STARTED
    elapsed: float = 0.0

    # Index of the interval active at the last tick
    current_interval_index: int = 0

    # Idempotency tracking
    last_signaled_interval_index: Optional[int] = None
    warning_already_fired_for_index: Optional[int] = None

    def with_phase(self, phase: SessionPhase) -> 'SessionState':
        return replace(self, phase=phase)

    def with_elapsed(self, elapsed: float) -> 'SessionState':
        return replace(self, elapsed=elapsed)

    def with_interval_signaled(self, index: int) -> 'SessionState':
        """Record an interval change and clear the warning marker."""
        return replace(
            self,
            current_interval_index=index,
            last_signaled_interval_index=index,
            warning_already_fired_for_index=None
        )

    def with_warning_fired(self, index: int) -> 'SessionState':
        return replace(self, warning_already_fired_for_index=index)


@dataclass(frozen=True)
class IntervalChanged:
    """The active interval changed."""
    index: int
    interval: Interval
    elapsed: float

    event_type = EventType.INTERVAL_CHANGED

    def to_dict(self) -> dict[str, Any]:
        return {
            'event_type': self.event_type.value,
            'index': self.index,
            'elapsed': self.elapsed,
            'interval': self.interval.to_dict(),
        }


@dataclass(frozen=True)
class UpcomingWarning:
    """An interval change is about to happen within the warning window."""
    index: int
    interval: Interval
    elapsed: float

    event_type = EventType.UPCOMING_WARNING

    @property
    def seconds_until(self) -> float:
        return max(0.0, self.interval.timestamp_seconds - self.elapsed)

    def to_dict(self) -> dict[str, Any]:
        return {
            'event_type': self.event_type.value,
            'index': self.index,
            'elapsed': self.elapsed,
            'seconds_until': self.seconds_until,
            'interval': self.interval.to_dict(),
        }


@dataclass(frozen=True)
class WorkoutCompleted:
    """Elapsed time reached the plan's total duration."""
    elapsed: float

    event_type = EventType.COMPLETED

    def to_dict(self) -> dict[str, Any]:
        return {
            'event_type': self.event_type.value,
            'elapsed': self.elapsed,
        }


SessionEvent = Union[IntervalChanged, UpcomingWarning, WorkoutCompleted]
