"""Standard output event delivery mechanism."""

import json
import math
import sys
from typing import Optional, TextIO

from ..data.models import Interval
from ..state.models import IntervalChanged, SessionEvent, UpcomingWarning
from ..utils.time import format_clock
from .base import BaseEventDelivery, DeliveryResult, DeliveryStatus

SPEED_UNIT_NAMES = {
    "kmh": "kilometers per hour",
    "mph": "miles per hour",
}


def format_speed(interval: Interval, speed_unit: str = "kmh") -> str:
    """Spoken-style speed in the display unit, one decimal place."""
    speed = interval.speed_mph if speed_unit == "mph" else interval.speed_kmh
    return f"{speed:.1f} {SPEED_UNIT_NAMES[speed_unit]}"


def format_incline(interval: Interval) -> str:
    return f"{interval.incline_percent:.1f} percent"


def render_message(event: SessionEvent, speed_unit: str = "kmh") -> str:
    """
    Render an event as the announcement a runner would hear.

    Args:
        event: Scheduler event
        speed_unit: Display unit for speeds, ``kmh`` or ``mph``

    Returns:
        Human readable message
    """
    if isinstance(event, UpcomingWarning):
        seconds = max(1, math.ceil(event.seconds_until))
        unit = "second" if seconds == 1 else "seconds"
        return (
            f"Get ready. In {seconds} {unit}, change speed to "
            f"{format_speed(event.interval, speed_unit)} and incline to "
            f"{format_incline(event.interval)}"
        )
    if isinstance(event, IntervalChanged):
        return (
            f"Change now. Speed {format_speed(event.interval, speed_unit)}, "
            f"incline {format_incline(event.interval)}"
        )
    return "Workout complete. Great job!"


class StdoutEventDelivery(BaseEventDelivery):
    """Standard output event delivery implementation."""

    def __init__(
        self,
        name: str = "stdout",
        output_format: str = "pretty",
        speed_unit: str = "kmh",
        stream: Optional[TextIO] = None
    ):
        super().__init__(name)
        if output_format not in ("pretty", "json"):
            raise ValueError(f"Unsupported stdout format: {output_format}")
        if speed_unit not in SPEED_UNIT_NAMES:
            raise ValueError(f"Unsupported speed unit: {speed_unit}")
        self.output_format = output_format
        self.speed_unit = speed_unit
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # sys.stdout is looked up per call
        return self._stream if self._stream is not None else sys.stdout

    def deliver(self, events: list[SessionEvent]) -> list[DeliveryResult]:
        """Deliver events to stdout."""
        results = []

        for event in events:
            try:
                print(self._format_event(event), file=self.stream, flush=True)

                results.append(DeliveryResult(
                    status=DeliveryStatus.SUCCESS,
                    message="Printed to stdout"
                ))

            except (OSError, ValueError) as e:
                self.logger.error(
                    "Failed to print event to stdout",
                    delivery_name=self.name,
                    event_type=event.event_type.value,
                    error=str(e)
                )
                results.append(DeliveryResult(
                    status=DeliveryStatus.FAILED,
                    message=f"Stdout error: {str(e)}",
                    error=e
                ))

        return self._record(results)

    def _format_event(self, event: SessionEvent) -> str:
        """Format event for stdout output."""
        if self.output_format == "pretty":
            return f"[{format_clock(event.elapsed)}] {render_message(event, self.speed_unit)}"
        return json.dumps(event.to_dict())

    def health_check(self) -> bool:
        """Check if stdout is available."""
        try:
            return self.stream.writable()
        except (OSError, ValueError):
            return False
