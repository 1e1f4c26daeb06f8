"""Default configuration parameters for the workout engine."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

BUNDLED_PLANS_DIR = Path(__file__).parent.parent / "resources" / "plans"


@dataclass(frozen=True)
class ClockParams:
    """Interval clock sampling parameters."""
    tick_interval_seconds: float = 0.1              # Sampling cadence while running
    suspension_threshold_seconds: float = 1.0       # Min wall/monotonic skew treated as a gap


@dataclass(frozen=True)
class SchedulerParams:
    """Interval scheduler parameters."""
    warning_window_seconds: float = 5.0             # Lookahead for upcoming warnings


@dataclass(frozen=True)
class IngestionParams:
    """Plan ingestion parameters."""
    mph_to_kmh: float = 1.60934


@dataclass(frozen=True)
class StorageParams:
    """Plan storage parameters."""
    db_path: str = str(Path.home() / ".pacer" / "plans.db")
    prebuilt_plans_dir: str = str(BUNDLED_PLANS_DIR)


@dataclass(frozen=True)
class DeliveryParams:
    """Event notification parameters."""
    stdout_format: str = "pretty"                   # pretty, json
    speed_unit: str = "kmh"                         # kmh, mph
    event_log_path: Optional[str] = None            # JSONL event log, disabled if None


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    clock: ClockParams
    scheduler: SchedulerParams
    ingestion: IngestionParams
    storage: StorageParams
    delivery: DeliveryParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        clock=ClockParams(),
        scheduler=SchedulerParams(),
        ingestion=IngestionParams(),
        storage=StorageParams(),
        delivery=DeliveryParams(),
    )
