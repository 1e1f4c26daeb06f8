"""
Plan data normalization for converting raw plan JSON to the canonical plan.

This module handles parsing of raw payloads, detection of the two supported
plan schemas, per-schema normalization, and validation of the canonical plan
invariants.

Supported schemas:
- Simple: ``{"name", "totalDuration"?, "intervals": [{"timestamp", "speed", "incline"}]}``
  with seconds, km/h and percent.
- Step: ``{"name", "total_duration_minutes"?, "steps": [{"start_min", "end_min"?,
  "speed_mph", "incline_percent"}]}`` with minutes, mph (number or array) and
  percent (number or array).
"""

import json
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

from ..errors import (
    FormatError,
    InvalidIntervalData,
    InvalidJSON,
    InvalidPlanData,
    MissingRequiredFields,
    ValidationError,
)
from ..logging.config import get_ingestion_logger, log_ingestion_decision
from .models import Interval, Plan

logger = get_ingestion_logger(__name__)

MPH_TO_KMH = 1.60934
SECONDS_PER_MINUTE = 60.0

RawPlan = Union[str, bytes, bytearray, dict]


class PlanFormat(str, Enum):
    """Supported plan input schemas."""
    SIMPLE = "simple"
    STEP = "step"


def parse_raw(raw: RawPlan) -> dict[str, Any]:
    """
    Decode a raw plan payload into a JSON object.

    Args:
        raw: JSON text, UTF-8 bytes, or an already decoded dictionary

    Returns:
        Decoded top-level JSON object

    Raises:
        InvalidJSON: If the payload cannot be decoded or is not a JSON object
    """
    if isinstance(raw, dict):
        return raw

    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode('utf-8')
        except UnicodeDecodeError as e:
            raise InvalidJSON(f"Plan payload is not valid UTF-8: {e}") from e

    if not isinstance(raw, str):
        raise InvalidJSON(f"Unsupported plan payload type: {type(raw).__name__}")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidJSON(f"Invalid JSON: {e}", raw_data=raw[:200]) from e

    if not isinstance(data, dict):
        raise InvalidJSON("Plan JSON must be an object", raw_data=raw[:200])

    return data


def detect_format(raw: RawPlan) -> PlanFormat:
    """
    Detect which schema a raw plan uses.

    Presence of a ``steps`` key selects the step schema, otherwise the
    simple schema is assumed.

    Raises:
        InvalidJSON: If the payload is not parseable structured data
    """
    data = parse_raw(raw)
    return PlanFormat.STEP if 'steps' in data else PlanFormat.SIMPLE


def _first_present(data: dict[str, Any], *keys: str) -> Any:
    """Return the first non-null value among snake_case/camelCase aliases."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _require_name(data: dict[str, Any]) -> str:
    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        raise MissingRequiredFields(
            "Plan field 'name' must be a non-empty string",
            missing_fields=['name']
        )
    return name


def _require_array(data: dict[str, Any], key: str) -> list:
    items = data.get(key)
    if not isinstance(items, list) or not items:
        raise MissingRequiredFields(
            f"Plan field '{key}' must be a non-empty array",
            missing_fields=[key]
        )
    return items


def _require_number(value: Any, field_name: str, index: int) -> float:
    if not _is_number(value):
        raise InvalidIntervalData(
            f"Interval {index + 1}: invalid {field_name}",
            index=index, field=field_name, value=value
        )
    if value < 0:
        raise InvalidIntervalData(
            f"Interval {index + 1}: {field_name} must be >= 0",
            index=index, field=field_name, value=value
        )
    return float(value)


def _optional_duration(value: Any, field_name: str) -> Optional[float]:
    if value is None:
        return None
    if not _is_number(value):
        raise InvalidPlanData(
            f"Plan field '{field_name}' must be a number",
            check="total_duration"
        )
    return float(value)


def _scaled(value: float, factor: float, field_name: str, index: int) -> float:
    scaled = value * factor
    if not math.isfinite(scaled):
        raise InvalidIntervalData(
            f"Interval {index + 1}: {field_name} is out of range",
            index=index, field=field_name, value=value
        )
    return scaled


def _scaled_duration(value: float, factor: float, field_name: str) -> float:
    scaled = value * factor
    if not math.isfinite(scaled):
        raise InvalidPlanData(
            f"Plan field '{field_name}' is out of range",
            check="total_duration"
        )
    return scaled


def _first_value(value: Any, field_name: str, index: int) -> float:
    """
    Resolve a step value given as a number or an array of numbers.

    Only the first array element is used.
    """
    if isinstance(value, list):
        if not value:
            raise InvalidIntervalData(
                f"Step {index + 1}: {field_name} array is empty",
                index=index, field=field_name, value=value
            )
        if len(value) > 1:
            logger.debug(
                "Discarding extra step values",
                step_index=index,
                field=field_name,
                used=value[0],
                discarded=value[1:]
            )
        value = value[0]

    return _require_number(value, field_name, index)


def normalize_simple(data: dict[str, Any], mph_to_kmh: float = MPH_TO_KMH) -> Plan:
    """
    Build an unvalidated plan from the simple schema.

    Speed and incline pass through unchanged; ``mph_to_kmh`` is accepted so
    all normalizers share one signature.
    """
    name = _require_name(data)
    raw_intervals = _require_array(data, 'intervals')

    intervals = []
    for i, raw in enumerate(raw_intervals):
        if not isinstance(raw, dict):
            raise InvalidIntervalData(f"Interval {i + 1}: must be an object", index=i, value=raw)
        intervals.append(Interval(
            timestamp_seconds=_require_number(raw.get('timestamp'), 'timestamp', i),
            speed_kmh=_require_number(raw.get('speed'), 'speed', i),
            incline_percent=_require_number(raw.get('incline'), 'incline', i),
        ))

    total_duration = _optional_duration(
        _first_present(data, 'totalDuration', 'total_duration'), 'totalDuration'
    )
    if total_duration is None:
        total_duration = intervals[-1].timestamp_seconds

    return Plan(
        name=name,
        total_duration_seconds=total_duration,
        intervals=tuple(intervals),
    )


def normalize_step(data: dict[str, Any], mph_to_kmh: float = MPH_TO_KMH) -> Plan:
    """
    Build an unvalidated plan from the step schema.

    Minutes become seconds, mph becomes km/h, and the resulting intervals are
    re-sorted by timestamp regardless of input order.
    """
    name = _require_name(data)
    steps = _require_array(data, 'steps')

    intervals = []
    for i, step in enumerate(steps):
        if not isinstance(step, dict):
            raise InvalidIntervalData(f"Step {i + 1}: must be an object", index=i, value=step)

        start_min = _require_number(_first_present(step, 'start_min', 'startMin'), 'start_min', i)
        speed_mph = _first_value(_first_present(step, 'speed_mph', 'speedMph'), 'speed_mph', i)
        incline = _first_value(
            _first_present(step, 'incline_percent', 'inclinePercent'), 'incline_percent', i
        )

        intervals.append(Interval(
            timestamp_seconds=_scaled(start_min, SECONDS_PER_MINUTE, 'start_min', i),
            speed_kmh=_scaled(speed_mph, mph_to_kmh, 'speed_mph', i),
            incline_percent=incline,
        ))

    intervals.sort(key=lambda interval: interval.timestamp_seconds)

    total_minutes = _optional_duration(
        _first_present(data, 'total_duration_minutes', 'totalDurationMinutes'),
        'total_duration_minutes'
    )
    last_step = steps[-1]
    end_min = _first_present(last_step, 'end_min', 'endMin')
    if end_min is not None:
        end_min = _require_number(end_min, 'end_min', len(steps) - 1)

    if total_minutes is not None:
        total_duration = _scaled_duration(
            total_minutes, SECONDS_PER_MINUTE, 'total_duration_minutes'
        )
    elif end_min is not None:
        total_duration = _scaled_duration(end_min, SECONDS_PER_MINUTE, 'end_min')
    else:
        total_duration = intervals[-1].timestamp_seconds

    return Plan(
        name=name,
        total_duration_seconds=total_duration,
        intervals=tuple(intervals),
    )


NORMALIZERS: dict[PlanFormat, Callable[[dict[str, Any], float], Plan]] = {
    PlanFormat.SIMPLE: normalize_simple,
    PlanFormat.STEP: normalize_step,
}


def _first_violation(plan: Plan) -> Optional[tuple[str, str]]:
    """Return (check, message) for the first failed plan invariant."""
    if not plan.name or not plan.name.strip():
        return "name", "Plan name is empty"

    if not plan.intervals:
        return "non_empty", "Plan has no intervals"

    for i in range(1, len(plan.intervals)):
        if plan.intervals[i].timestamp_seconds < plan.intervals[i - 1].timestamp_seconds:
            return "monotonic", f"Interval {i + 1} starts before interval {i}"

    if plan.intervals[0].timestamp_seconds != 0:
        return "starts_at_zero", "First interval must start at 0 seconds"

    for i, interval in enumerate(plan.intervals):
        if (interval.timestamp_seconds < 0
                or interval.speed_kmh < 0
                or interval.incline_percent < 0):
            return "non_negative", f"Interval {i + 1} has a negative field"

    if not plan.total_duration_seconds > 0:
        return "positive_duration", "Total duration must be greater than 0"

    return None


def validate(plan: Plan) -> bool:
    """Check the canonical plan invariants."""
    return _first_violation(plan) is None


def ensure_valid(plan: Plan) -> Plan:
    """
    Check the canonical plan invariants, raising on the first failure.

    Raises:
        InvalidPlanData: Naming the failed check
    """
    violation = _first_violation(plan)
    if violation is not None:
        check, message = violation
        raise InvalidPlanData(message, check=check, context={'plan_name': plan.name})
    return plan


def normalize(raw: RawPlan, mph_to_kmh: float = MPH_TO_KMH) -> Plan:
    """
    Detect, normalize and validate a raw plan.

    Args:
        raw: JSON text, UTF-8 bytes, or an already decoded dictionary
        mph_to_kmh: Speed conversion factor for the step schema

    Returns:
        A validated, immutable plan

    Raises:
        InvalidJSON: Unparseable input
        MissingRequiredFields: Name, intervals or steps absent or empty
        InvalidIntervalData: Interval field missing, non-numeric or negative
        InvalidPlanData: Normalized plan fails an invariant
    """
    data = parse_raw(raw)
    plan_format = detect_format(data)
    name = data.get('name') if isinstance(data.get('name'), str) else None

    try:
        plan = ensure_valid(NORMALIZERS[plan_format](data, mph_to_kmh))
    except ValidationError as e:
        log_ingestion_decision(
            logger,
            plan_name=name,
            plan_format=plan_format.value,
            accepted=False,
            reason=str(e),
            context={'error_type': type(e).__name__}
        )
        raise

    log_ingestion_decision(
        logger,
        plan_name=plan.name,
        plan_format=plan_format.value,
        accepted=True,
        reason="valid",
        context={
            'interval_count': plan.interval_count,
            'total_duration_seconds': plan.total_duration_seconds
        }
    )
    return plan


@dataclass
class PlanNormalizationResult:
    """Result of plan normalization process."""
    # Normalized plan (None if invalid)
    plan: Optional[Plan] = None
    # Processing metadata
    success: bool = True
    error: Optional[Exception] = None
    error_msg: Optional[str] = None

    @classmethod
    def ok(cls, plan: Plan) -> 'PlanNormalizationResult':
        """Create successful result with normalized plan."""
        return cls(plan=plan, success=True)

    @classmethod
    def failed(cls, error: Exception) -> 'PlanNormalizationResult':
        """Create error result."""
        return cls(success=False, error=error, error_msg=str(error))


class PlanNormalizer:
    """
    Plan normalization pipeline.

    Wraps the module-level functions with configuration and offers an
    explicit-result entry point for callers that present errors instead of
    propagating them.
    """

    def __init__(self, config: Optional[dict[str, Any]] = None):
        """
        Initialize plan normalizer with configuration.

        Args:
            config: Ingestion configuration dict (``mph_to_kmh``)
        """
        self.config = config or {}
        self.mph_to_kmh = float(self.config.get('mph_to_kmh', MPH_TO_KMH))
        self.logger = logger

    def normalize(self, raw: RawPlan) -> Plan:
        """Normalize and validate, raising typed ingestion errors."""
        return normalize(raw, mph_to_kmh=self.mph_to_kmh)

    def normalize_plan(self, raw: RawPlan) -> PlanNormalizationResult:
        """
        Normalize a plan from raw format to canonical format.

        Args:
            raw: Raw plan payload

        Returns:
            PlanNormalizationResult with the plan or the typed error
        """
        try:
            return PlanNormalizationResult.ok(self.normalize(raw))
        except (FormatError, ValidationError) as e:
            return PlanNormalizationResult.failed(e)
