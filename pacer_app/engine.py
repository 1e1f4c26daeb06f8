"""
Workout engine coordinator.

Wires configuration, plan storage, plan import, event delivery and the tick
loop around individual workout sessions.
"""

from pathlib import Path
from typing import Any, Optional, Union

import structlog

from .clock.interval_clock import IntervalClock
from .clock.ticker import TickLoop
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .data.models import Plan
from .data.plan_normalizer import PlanNormalizer, RawPlan
from .delivery.base import BaseEventDelivery
from .delivery.file_delivery import FileEventDelivery
from .delivery.stdout_delivery import StdoutEventDelivery
from .errors import DeliveryError
from .importer import PlanImporter
from .persistence.launch_state import LaunchStateStore
from .persistence.plan_store import PlanRepository, SqlitePlanStore
from .state.models import SessionEvent, SessionPhase
from .state.scheduler import IntervalScheduler
from .state.session import WorkoutSession

logger = structlog.get_logger(__name__)


class EventDispatcher:
    """Session subscriber fanning each event batch out to delivery sinks."""

    def __init__(self, sinks: list[BaseEventDelivery]) -> None:
        self.sinks = list(sinks)

    def __call__(self, events: list[SessionEvent]) -> None:
        """
        Deliver events to every sink.

        Raises:
            DeliveryError: After all sinks ran, if any event failed on any sink
        """
        failed: list[str] = []
        first_error: Optional[Exception] = None

        for sink in self.sinks:
            for result in sink.deliver(events):
                if not result.ok:
                    failed.append(sink.name)
                    first_error = first_error or result.error
                    break

        if failed:
            raise DeliveryError(
                f"Event delivery failed for sinks: {', '.join(failed)}",
                delivery_method=failed[0],
                event_type=events[0].event_type.value if events else None,
                context={'failed_sinks': failed, 'error': str(first_error)}
            )


class WorkoutEngine:
    """
    Main coordinator for the interval workout system.

    Manages the pipeline:
    Raw plan → Normalization → Storage → Session (clock + scheduler) → Sinks
    """

    def __init__(
        self,
        config_dir: Optional[str] = None,
        overrides: Optional[dict[str, Any]] = None,
        store: Optional[PlanRepository] = None,
        launch_state: Optional[LaunchStateStore] = None,
    ) -> None:
        """
        Initialize the workout engine.

        Args:
            config_dir: Directory holding pacer.yaml, repository config/ by default
            overrides: Highest-precedence configuration values
            store: Plan repository, SQLite at the configured path by default
            launch_state: First-launch flag, stored beside the plan database by default

        Raises:
            ValueError: If the merged configuration is invalid
        """
        self.logger = logger

        self.config_loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
        self.config = self.config_loader.merge_config(overrides)

        issues = ConfigValidator.validate_config(self.config)
        if issues:
            error_msgs = [f"{issue.field}: {issue.message} (got: {issue.value})" for issue in issues]
            self.logger.error("Configuration validation failed", errors=error_msgs)
            raise ValueError(f"Invalid configuration: {'; '.join(error_msgs)}")

        db_path = self.config["storage"]["db_path"]
        self.store = store or SqlitePlanStore(db_path)
        self.launch_state = launch_state or LaunchStateStore(db_path)
        self.normalizer = PlanNormalizer(self.config["ingestion"])
        self.importer = PlanImporter(self.store, self.normalizer)

        self._active_loop: Optional[TickLoop] = None

        self.logger.info("Workout engine initialized", db_path=db_path)

    def initialize(self) -> list[Plan]:
        """
        Prepare storage and import bundled plans on first launch.

        Returns:
            Prebuilt plans imported by this call
        """
        self.launch_state.initialize()
        return self.importer.import_prebuilt(
            self.config["storage"]["prebuilt_plans_dir"],
            self.launch_state
        )

    def import_plan(self, raw: RawPlan) -> Plan:
        """Import a plan from JSON text, bytes or a decoded dictionary."""
        return self.importer.import_json(raw)

    def import_file(self, path: Union[str, Path]) -> Plan:
        return self.importer.import_file(path)

    def list_plans(self) -> list[Plan]:
        """Stored plans, newest first."""
        return self.store.load_all()

    def get_plan(self, plan_id: str) -> Optional[Plan]:
        return self.store.load(plan_id)

    def delete_plan(self, plan_id: str) -> None:
        self.store.delete(plan_id)
        self.logger.info("Plan removed", plan_id=plan_id)

    def build_sinks(self, session_id: str, plan: Plan) -> list[BaseEventDelivery]:
        """Create the configured delivery sinks for one session."""
        delivery = self.config["delivery"]
        sinks: list[BaseEventDelivery] = [
            StdoutEventDelivery(
                output_format=delivery["stdout_format"],
                speed_unit=delivery["speed_unit"]
            )
        ]

        if delivery.get("event_log_path"):
            sinks.append(FileEventDelivery(
                delivery["event_log_path"],
                extra_fields={'session_id': session_id, 'plan_name': plan.name}
            ))

        return sinks

    def create_session(
        self,
        plan: Plan,
        sinks: Optional[list[BaseEventDelivery]] = None,
        clock: Optional[IntervalClock] = None,
    ) -> WorkoutSession:
        """
        Create a session for a plan with delivery sinks subscribed.

        Args:
            plan: Validated plan to run
            sinks: Delivery sinks, the configured ones when omitted
            clock: Interval clock, a monotonic one when omitted

        Returns:
            A session in NOT_STARTED phase
        """
        scheduler = IntervalScheduler(self.config["scheduler"]["warning_window_seconds"])
        session = WorkoutSession(plan, clock=clock, scheduler=scheduler)

        if sinks is None:
            sinks = self.build_sinks(session.session_id, plan)
        if sinks:
            session.subscribe(EventDispatcher(sinks))

        self.logger.info(
            "Workout session created",
            session_id=session.session_id,
            plan_name=plan.name,
            sinks=[sink.name for sink in sinks]
        )
        return session

    def run_session(self, session: WorkoutSession, max_ticks: Optional[int] = None) -> SessionPhase:
        """
        Drive a session with a tick loop until it finishes or is stopped.

        Starts the session when it has not started yet. Blocks the calling
        thread.

        Args:
            session: Session to drive
            max_ticks: Optional upper bound on ticks, mainly for tests

        Returns:
            Session phase when the loop exited
        """
        clock_params = self.config["clock"]

        def on_tick() -> None:
            session.tick()
            if session.phase.is_terminal:
                loop.stop()

        loop = TickLoop(
            on_tick=on_tick,
            interval_seconds=clock_params["tick_interval_seconds"],
            on_gap=session.report_suspension_gap,
            suspension_threshold_seconds=clock_params["suspension_threshold_seconds"],
        )

        if session.phase == SessionPhase.NOT_STARTED:
            session.start()

        self._active_loop = loop
        try:
            ticks = loop.run(max_ticks=max_ticks)
        finally:
            self._active_loop = None

        self.logger.info(
            "Session loop finished",
            session_id=session.session_id,
            phase=session.phase.value,
            ticks=ticks
        )
        return session.phase

    def stop(self) -> None:
        """Stop the running tick loop, if any."""
        if self._active_loop is not None:
            self._active_loop.stop()
