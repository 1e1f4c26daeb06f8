"""
System failure error classifications for storage and notification sinks.

These exceptions wrap failures raised by external collaborators so callers
can surface them without inspecting backend-specific exception types.
"""

from typing import Any, Optional


class SystemFailureError(Exception):
    """Base class for failures of external collaborators."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class PersistenceError(SystemFailureError):
    """Database or file system persistence failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target


class DeliveryError(SystemFailureError):
    """Event notification sink failures."""

    def __init__(self, message: str, delivery_method: Optional[str] = None,
                 event_type: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.delivery_method = delivery_method
        self.event_type = event_type
