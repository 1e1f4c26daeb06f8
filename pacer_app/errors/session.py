"""
Workout session state error classifications.

Raised when a session operation is not valid for the session's current phase.
"""

from typing import Any, Optional


class SessionStateError(Exception):
    """Base class for operations invalid in the current session phase."""

    def __init__(self, message: str, current_phase: Optional[str] = None,
                 attempted_operation: Optional[str] = None,
                 context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.current_phase = current_phase
        self.attempted_operation = attempted_operation
        self.context = context or {}


class WorkoutNotStarted(SessionStateError):
    """pause, resume or stop was called before the workout started."""


class WorkoutAlreadyActive(SessionStateError):
    """start was called while the workout is active or paused."""


class SessionFinished(SessionStateError):
    """start was called on a completed or stopped session."""
