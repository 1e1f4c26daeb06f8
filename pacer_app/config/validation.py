"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationIssue:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_clock_params(params: dict[str, Any]) -> list[ValidationIssue]:
        """Validate clock parameters."""
        errors = []

        if "tick_interval_seconds" in params:
            value = params["tick_interval_seconds"]
            if not _is_number(value) or value <= 0 or value > 1:
                errors.append(ValidationIssue(
                    field="tick_interval_seconds",
                    message="Must be a positive number no greater than 1",
                    value=value
                ))

        if "suspension_threshold_seconds" in params:
            value = params["suspension_threshold_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationIssue(
                    field="suspension_threshold_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_scheduler_params(params: dict[str, Any]) -> list[ValidationIssue]:
        """Validate scheduler parameters."""
        errors = []

        if "warning_window_seconds" in params:
            value = params["warning_window_seconds"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationIssue(
                    field="warning_window_seconds",
                    message="Must be a non-negative number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_ingestion_params(params: dict[str, Any]) -> list[ValidationIssue]:
        """Validate ingestion parameters."""
        errors = []

        if "mph_to_kmh" in params:
            value = params["mph_to_kmh"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationIssue(
                    field="mph_to_kmh",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_delivery_params(params: dict[str, Any]) -> list[ValidationIssue]:
        """Validate delivery parameters."""
        errors = []

        if "stdout_format" in params:
            value = params["stdout_format"]
            if value not in ("pretty", "json"):
                errors.append(ValidationIssue(
                    field="stdout_format",
                    message="Must be 'pretty' or 'json'",
                    value=value
                ))

        if "speed_unit" in params:
            value = params["speed_unit"]
            if value not in ("kmh", "mph"):
                errors.append(ValidationIssue(
                    field="speed_unit",
                    message="Must be 'kmh' or 'mph'",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationIssue]:
        """Validate complete configuration."""
        errors = []

        if "clock" in config:
            errors.extend(ConfigValidator.validate_clock_params(config["clock"]))

        if "scheduler" in config:
            errors.extend(ConfigValidator.validate_scheduler_params(config["scheduler"]))

        if "ingestion" in config:
            errors.extend(ConfigValidator.validate_ingestion_params(config["ingestion"]))

        if "delivery" in config:
            errors.extend(ConfigValidator.validate_delivery_params(config["delivery"]))

        return errors
