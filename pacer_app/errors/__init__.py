"""
Error classification for plan ingestion, workout sessions and storage.

This module provides the structured exception hierarchy used across the
ingestion pipeline, the session state machine and the storage collaborators.
"""

from .ingestion import (
    FormatError,
    InvalidJSON,
    ValidationError,
    MissingRequiredFields,
    InvalidIntervalData,
    InvalidPlanData,
    DuplicatePlanName,
)
from .session import (
    SessionStateError,
    WorkoutNotStarted,
    WorkoutAlreadyActive,
    SessionFinished,
)
from .system_failures import (
    SystemFailureError,
    PersistenceError,
    DeliveryError,
)

__all__ = [
    # Ingestion Errors
    "FormatError",
    "InvalidJSON",
    "ValidationError",
    "MissingRequiredFields",
    "InvalidIntervalData",
    "InvalidPlanData",
    "DuplicatePlanName",
    # Session Errors
    "SessionStateError",
    "WorkoutNotStarted",
    "WorkoutAlreadyActive",
    "SessionFinished",
    # System Failures
    "SystemFailureError",
    "PersistenceError",
    "DeliveryError",
]
