"""
Canonical workout plan data models.

This module defines the immutable interval and plan structures produced by
the ingestion pipeline and read by the clock, scheduler and storage layers.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..utils.time import format_timestamp, parse_timestamp, utc_now

KMH_TO_MPH = 0.621371


@dataclass(frozen=True)
class Interval:
    """
    A timed treadmill setting.

    The interval begins at its timestamp and runs until the next interval's
    timestamp. Speed is always stored in km/h.
    """
    timestamp_seconds: float
    speed_kmh: float
    incline_percent: float

    @property
    def speed_mph(self) -> float:
        """Speed converted to miles per hour for display."""
        return self.speed_kmh * KMH_TO_MPH

    def to_dict(self) -> dict[str, float]:
        """Convert to storage dictionary."""
        return {
            'timestamp_seconds': self.timestamp_seconds,
            'speed_kmh': self.speed_kmh,
            'incline_percent': self.incline_percent,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Interval':
        """Rebuild an interval from its storage dictionary."""
        return cls(
            timestamp_seconds=float(data['timestamp_seconds']),
            speed_kmh=float(data['speed_kmh']),
            incline_percent=float(data['incline_percent']),
        )


@dataclass(frozen=True)
class Plan:
    """Canonical, validated workout plan."""
    name: str
    total_duration_seconds: float
    intervals: tuple[Interval, ...]
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    @property
    def interval_count(self) -> int:
        return len(self.intervals)

    def to_dict(self) -> dict[str, Any]:
        """Convert to storage dictionary with an ISO8601 creation stamp."""
        return {
            'id': self.id,
            'name': self.name,
            'total_duration_seconds': self.total_duration_seconds,
            'intervals': [interval.to_dict() for interval in self.intervals],
            'created_at': format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Plan':
        """Rebuild a stored plan. Stored plans were validated on ingestion."""
        return cls(
            id=str(data['id']),
            name=str(data['name']),
            total_duration_seconds=float(data['total_duration_seconds']),
            intervals=tuple(Interval.from_dict(item) for item in data['intervals']),
            created_at=parse_timestamp(data['created_at']),
        )
