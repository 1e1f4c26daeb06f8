"""
Interval clock for elapsed workout time.

The clock only does elapsed-time arithmetic against an injected time source;
it does not own any timer. A tick driver samples it at a fixed cadence.
"""

import time
from enum import Enum
from typing import Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


class ClockState(str, Enum):
    """Interval clock states."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class IntervalClock:
    """
    Finite-state timer reporting elapsed session seconds.

    States: IDLE -> RUNNING <-> PAUSED, and RUNNING|PAUSED -> IDLE on stop.
    While running, elapsed is ``now - origin``; pausing freezes the value and
    resuming moves the origin so elapsed continues from the frozen value.
    """

    def __init__(self, now: Callable[[], float] = time.monotonic) -> None:
        """
        Initialize an idle clock.

        Args:
            now: Time source in seconds, monotonic in production
        """
        self._now = now
        self._state = ClockState.IDLE
        self._origin: Optional[float] = None
        self._frozen_elapsed = 0.0
        self._latest = 0.0

    @property
    def state(self) -> ClockState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == ClockState.RUNNING

    @property
    def latest(self) -> float:
        """Elapsed value captured by the most recent sample()."""
        return self._latest

    def start(self) -> None:
        """Reset elapsed to zero and start running from now."""
        self._origin = self._now()
        self._frozen_elapsed = 0.0
        self._latest = 0.0
        self._state = ClockState.RUNNING

    def pause(self) -> None:
        """Freeze elapsed time. No-op unless running."""
        if self._state != ClockState.RUNNING:
            return
        self._frozen_elapsed = self.elapsed()
        self._latest = self._frozen_elapsed
        self._state = ClockState.PAUSED

    def resume(self) -> None:
        """Continue from the frozen elapsed value. No-op unless paused."""
        if self._state != ClockState.PAUSED:
            return
        self._origin = self._now() - self._frozen_elapsed
        self._state = ClockState.RUNNING

    def stop(self) -> None:
        """Return to idle and clear all timing state. Idempotent."""
        self._state = ClockState.IDLE
        self._origin = None
        self._frozen_elapsed = 0.0
        self._latest = 0.0

    def elapsed(self) -> float:
        """Current elapsed seconds for the clock's state."""
        if self._state == ClockState.RUNNING and self._origin is not None:
            return self._now() - self._origin
        if self._state == ClockState.PAUSED:
            return self._frozen_elapsed
        return 0.0

    def sample(self) -> float:
        """Recompute elapsed and keep it as the latest value."""
        self._latest = self.elapsed()
        return self._latest

    def report_suspension_gap(self, gap_seconds: float) -> None:
        """
        Account for a period in which the host delivered no ticks.

        The origin is moved earlier by the gap so elapsed reflects true
        wall-clock progress. Ignored unless running.

        Args:
            gap_seconds: Length of the suspension in seconds
        """
        if self._state != ClockState.RUNNING or self._origin is None or gap_seconds <= 0:
            logger.debug(
                "Ignoring suspension gap",
                clock_state=self._state.value,
                gap_seconds=gap_seconds
            )
            return

        self._origin -= gap_seconds
        logger.info(
            "Suspension gap applied",
            gap_seconds=round(gap_seconds, 3),
            elapsed_seconds=round(self.elapsed(), 3)
        )
