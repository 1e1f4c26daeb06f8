"""
Periodic tick driver for workout sessions.

Invokes a single callback at a fixed cadence on the calling thread, so tick
callbacks never overlap. Host suspension is detected by comparing monotonic
progress with a clock that keeps counting while the host sleeps.

Where the platform has CLOCK_BOOTTIME that clock is used, so stepping the
system time (NTP, manual changes) is not mistaken for a suspension. Elsewhere
the wall clock is the fallback and a forward time step is reported as a gap.
"""

import threading
import time
from typing import Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


def suspend_aware_clock() -> Callable[[], float]:
    """Time source that includes host suspension and ignores time steps when possible."""
    if hasattr(time, "CLOCK_BOOTTIME"):
        return lambda: time.clock_gettime(time.CLOCK_BOOTTIME)
    return time.time


class TickLoop:
    """Blocking fixed-cadence tick source with suspension gap detection."""

    def __init__(
        self,
        on_tick: Callable[[], None],
        interval_seconds: float = 0.1,
        on_gap: Optional[Callable[[float], None]] = None,
        suspension_threshold_seconds: float = 1.0,
        monotonic: Callable[[], float] = time.monotonic,
        wall_clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], object]] = None,
    ) -> None:
        """
        Initialize the tick loop.

        Args:
            on_tick: Callback invoked once per tick
            interval_seconds: Tick cadence
            on_gap: Callback receiving a detected suspension gap in seconds
            suspension_threshold_seconds: Minimum wall/monotonic skew reported as a gap
            monotonic: Monotonic time source, excludes host suspension
            wall_clock: Time source including host suspension; suspend_aware_clock() when omitted
            sleep: Sleep function; defaults to an interruptible wait
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")

        self._on_tick = on_tick
        self._on_gap = on_gap
        self._interval = interval_seconds
        self._threshold = suspension_threshold_seconds
        self._monotonic = monotonic
        self._wall_clock = wall_clock or suspend_aware_clock()
        self._stop_event = threading.Event()
        self._sleep = sleep or self._stop_event.wait
        self._running = False
        self._tick_count = 0

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def tick_count(self) -> int:
        return self._tick_count

    def stop(self) -> None:
        """Request the loop to exit after the current tick. Idempotent."""
        self._stop_event.set()

    def run(self, max_ticks: Optional[int] = None) -> int:
        """
        Run ticks until stop() is called or max_ticks is reached.

        Args:
            max_ticks: Optional upper bound on delivered ticks

        Returns:
            Number of ticks delivered by this run
        """
        if self._running:
            raise RuntimeError("Tick loop already running")

        self._running = True
        self._stop_event.clear()
        delivered = 0
        last_mono = self._monotonic()
        last_wall = self._wall_clock()

        logger.debug("Tick loop started", interval_seconds=self._interval)
        try:
            while not self._stop_event.is_set():
                if max_ticks is not None and delivered >= max_ticks:
                    break

                mono = self._monotonic()
                wall = self._wall_clock()
                gap = (wall - last_wall) - (mono - last_mono)
                last_mono, last_wall = mono, wall

                if gap > self._threshold and self._on_gap is not None:
                    logger.info("Suspension gap detected", gap_seconds=round(gap, 3))
                    self._on_gap(gap)

                self._on_tick()
                delivered += 1
                self._tick_count += 1

                if self._stop_event.is_set():
                    break
                self._sleep(self._interval)
        finally:
            self._running = False
            logger.debug("Tick loop stopped", ticks=delivered)

        return delivered
