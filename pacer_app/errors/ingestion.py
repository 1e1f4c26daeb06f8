"""
Plan ingestion error classifications.

These exceptions separate input that cannot be parsed at all from input
that parses but violates the plan schema or the canonical plan invariants.
"""

from typing import Any, Optional


class FormatError(Exception):
    """Base class for input that is not parseable structured data."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class InvalidJSON(FormatError):
    """Raw plan payload is malformed or not a JSON object."""

    def __init__(self, message: str, raw_data: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data


class ValidationError(Exception):
    """Base class for parseable input that fails plan validation."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class MissingRequiredFields(ValidationError):
    """Plan name, intervals or steps are absent or empty."""

    def __init__(self, message: str, missing_fields: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.missing_fields = missing_fields or []


class InvalidIntervalData(ValidationError):
    """An interval field is missing, non-numeric or negative."""

    def __init__(self, message: str, index: Optional[int] = None,
                 field: Optional[str] = None, value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.index = index
        self.field = field
        self.value = value


class InvalidPlanData(InvalidIntervalData):
    """
    A normalized plan violates one of the canonical plan invariants.

    Subclasses InvalidIntervalData so callers catching interval errors also
    see invariant failures found after normalization.
    """

    def __init__(self, message: str, check: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.check = check


class DuplicatePlanName(ValidationError):
    """A plan with the same name already exists in storage."""

    def __init__(self, name: str, **kwargs):
        super().__init__(f"A plan with the name '{name}' already exists", **kwargs)
        self.name = name
