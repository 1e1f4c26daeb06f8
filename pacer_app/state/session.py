"""
Workout session lifecycle.

A WorkoutSession owns one interval clock and one scheduler for a single run
of a plan. It enforces the phase machine, feeds clock samples through the
scheduler and publishes the resulting events to subscribers.
"""

import threading
import uuid
from typing import Callable, Optional

from ..clock.interval_clock import IntervalClock
from ..data.models import Interval, Plan
from ..errors import SessionFinished, WorkoutAlreadyActive, WorkoutNotStarted
from ..logging.config import get_session_logger, log_state_transition
from .models import SessionEvent, SessionPhase, SessionState
from .scheduler import IntervalScheduler, current_interval, upcoming_interval

EventCallback = Callable[[list[SessionEvent]], None]


class WorkoutSession:
    """
    Drives one plan through NOT_STARTED -> ACTIVE <-> PAUSED -> COMPLETED|STOPPED.

    Completed and stopped sessions are terminal and cannot be restarted;
    create a new session to run the plan again.
    """

    def __init__(
        self,
        plan: Plan,
        clock: Optional[IntervalClock] = None,
        scheduler: Optional[IntervalScheduler] = None,
        session_id: Optional[str] = None
    ) -> None:
        """
        Initialize a session that has not started yet.

        Args:
            plan: Validated plan to execute
            clock: Interval clock, a monotonic one when omitted
            scheduler: Interval scheduler, default warning window when omitted
            session_id: Identifier used in logs, generated when omitted
        """
        self.plan = plan
        self.clock = clock or IntervalClock()
        self.scheduler = scheduler or IntervalScheduler()
        self.session_id = session_id or str(uuid.uuid4())
        self._state = SessionState()
        # Serializes control calls from other threads with tick processing
        self._lock = threading.RLock()
        self._subscribers: list[EventCallback] = []
        self.logger = get_session_logger(__name__).bind(
            session_id=self.session_id,
            plan_name=plan.name
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> SessionPhase:
        return self._state.phase

    @property
    def elapsed(self) -> float:
        return self._state.elapsed

    @property
    def time_remaining(self) -> float:
        """Seconds left until the plan's total duration, never negative."""
        return max(0.0, self.plan.total_duration_seconds - self._state.elapsed)

    @property
    def current_interval(self) -> Interval:
        return current_interval(self.plan, self._state.elapsed)

    @property
    def next_interval(self) -> Optional[Interval]:
        """Interval starting within the warning window, if any."""
        return upcoming_interval(
            self.plan,
            self._state.elapsed,
            self.scheduler.warning_window_seconds
        )

    def subscribe(self, callback: EventCallback) -> None:
        """Register a callback receiving each non-empty batch of tick events."""
        self._subscribers.append(callback)

    def start(self) -> None:
        """Start the workout from zero elapsed time."""
        with self._lock:
            phase = self._state.phase
            if phase.is_terminal:
                raise SessionFinished(
                    "Session has already finished; create a new session",
                    current_phase=phase.value,
                    attempted_operation="start"
                )
            if phase != SessionPhase.NOT_STARTED:
                raise WorkoutAlreadyActive(
                    "Workout is already in progress",
                    current_phase=phase.value,
                    attempted_operation="start"
                )

            self.clock.start()
            self._transition(SessionPhase.ACTIVE, "start")

    def pause(self) -> None:
        """Pause an active workout. No-op when already paused."""
        with self._lock:
            phase = self._require_started("pause")
            if phase != SessionPhase.ACTIVE:
                return

            self.clock.pause()
            self._state = self._state.with_elapsed(self.clock.latest)
            self._transition(SessionPhase.PAUSED, "pause")

    def resume(self) -> None:
        """Resume a paused workout. No-op when already active."""
        with self._lock:
            phase = self._require_started("resume")
            if phase != SessionPhase.PAUSED:
                return

            self.clock.resume()
            self._transition(SessionPhase.ACTIVE, "resume")

    def stop(self) -> None:
        """Stop the workout early. Idempotent on finished sessions."""
        with self._lock:
            phase = self._require_started("stop")
            if phase.is_terminal:
                return

            self.clock.stop()
            self._transition(SessionPhase.STOPPED, "stop")

    def tick(self) -> list[SessionEvent]:
        """
        Sample the clock and run the scheduler once.

        Control calls made from other threads wait for the tick to finish, so
        a pause is never overwritten by the state computed for this tick.
        Subscribers are notified after the lock is released.

        Returns:
            Events produced by this tick, empty when the session is not active
        """
        with self._lock:
            if self._state.phase != SessionPhase.ACTIVE:
                return []

            elapsed = self.clock.sample()
            previous_phase = self._state.phase
            self._state, events = self.scheduler.on_tick(self.plan, elapsed, self._state)

            if self._state.phase == SessionPhase.COMPLETED:
                self.clock.stop()
                log_state_transition(
                    self.logger,
                    session_id=self.session_id,
                    from_state=previous_phase.value,
                    to_state=SessionPhase.COMPLETED.value,
                    trigger="elapsed_reached_total",
                    context={"elapsed": round(elapsed, 3)}
                )

        if events:
            self._publish(events)
        return events

    def report_suspension_gap(self, gap_seconds: float) -> None:
        """Forward a detected host suspension to the clock while active."""
        with self._lock:
            if self._state.phase != SessionPhase.ACTIVE:
                self.logger.debug(
                    "Suspension gap ignored",
                    phase=self._state.phase.value,
                    gap_seconds=gap_seconds
                )
                return
            self.clock.report_suspension_gap(gap_seconds)

    def _require_started(self, operation: str) -> SessionPhase:
        phase = self._state.phase
        if phase == SessionPhase.NOT_STARTED:
            raise WorkoutNotStarted(
                f"Cannot {operation}: workout has not started",
                current_phase=phase.value,
                attempted_operation=operation
            )
        return phase

    def _transition(self, to_phase: SessionPhase, trigger: str) -> None:
        from_phase = self._state.phase
        self._state = self._state.with_phase(to_phase)
        log_state_transition(
            self.logger,
            session_id=self.session_id,
            from_state=from_phase.value,
            to_state=to_phase.value,
            trigger=trigger,
            context={"elapsed": round(self._state.elapsed, 3)}
        )

    def _publish(self, events: list[SessionEvent]) -> None:
        for callback in self._subscribers:
            try:
                callback(events)
            except Exception as e:
                # A failing subscriber must not stop the workout
                self.logger.error(
                    "Event subscriber failed",
                    error=str(e),
                    error_type=type(e).__name__,
                    event_types=[event.event_type.value for event in events]
                )
