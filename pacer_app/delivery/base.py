"""Base classes for session event delivery mechanisms."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import structlog

from ..state.models import SessionEvent


class DeliveryStatus(Enum):
    """Event delivery status."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class DeliveryResult:
    """Result of a single event delivery attempt."""
    status: DeliveryStatus
    message: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status == DeliveryStatus.SUCCESS


class BaseEventDelivery(ABC):
    """
    Base class for event notification sinks.

    Sinks report failures through DeliveryResult and never retry; each event
    is attempted exactly once.
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = structlog.get_logger(f"event.delivery.{name}")
        self._delivery_count = 0
        self._error_count = 0

    @abstractmethod
    def deliver(self, events: list[SessionEvent]) -> list[DeliveryResult]:
        """
        Deliver events to the configured destination.

        Args:
            events: Events emitted by one session tick, in order

        Returns:
            List of delivery results for each event
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if delivery mechanism is healthy."""
        pass

    def _record(self, results: list[DeliveryResult]) -> list[DeliveryResult]:
        for result in results:
            if result.ok:
                self._delivery_count += 1
            else:
                self._error_count += 1
        return results

    def get_stats(self) -> dict[str, Any]:
        """Get delivery statistics."""
        return {
            "name": self.name,
            "delivery_count": self._delivery_count,
            "error_count": self._error_count,
            "success_rate": (
                self._delivery_count / (self._delivery_count + self._error_count)
                if (self._delivery_count + self._error_count) > 0 else 0.0
            )
        }

    def reset_stats(self):
        """Reset delivery statistics."""
        self._delivery_count = 0
        self._error_count = 0
