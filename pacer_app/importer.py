"""
Plan import into storage.

Each import is all-or-nothing: a plan is normalized and validated in full
before anything is written, and a plan whose name is already stored is
rejected. Bundled prebuilt plans are imported once, on first launch.
"""

from pathlib import Path
from typing import Optional, Union

from .data.models import Plan
from .data.plan_normalizer import PlanNormalizer, RawPlan
from .errors import DuplicatePlanName, FormatError, PersistenceError, ValidationError
from .logging.config import get_ingestion_logger
from .persistence.launch_state import LaunchStateStore
from .persistence.plan_store import PlanRepository

logger = get_ingestion_logger(__name__)


class PlanImporter:
    """Normalizes raw plans and stores the ones that pass validation."""

    def __init__(self, store: PlanRepository, normalizer: Optional[PlanNormalizer] = None):
        self.store = store
        self.normalizer = normalizer or PlanNormalizer()

    def import_json(self, raw: RawPlan) -> Plan:
        """
        Import one plan from JSON text, bytes or a decoded dictionary.

        Args:
            raw: Raw plan payload in either supported schema

        Returns:
            The stored plan

        Raises:
            FormatError: Payload is not a JSON object
            ValidationError: Payload fails validation or the name is taken
            PersistenceError: Storage write failed
        """
        plan = self.normalizer.normalize(raw)

        if self.store.exists(plan.name):
            logger.warning("Duplicate plan name rejected", plan_name=plan.name)
            raise DuplicatePlanName(plan.name, context={'plan_id': plan.id})

        self.store.save(plan)
        logger.info("Plan imported", plan_name=plan.name, plan_id=plan.id)
        return plan

    def import_file(self, path: Union[str, Path]) -> Plan:
        """Import one plan from a JSON file."""
        path = Path(path)
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise PersistenceError(
                f"Cannot read plan file: {e}",
                operation="read_file",
                target=str(path)
            ) from e
        return self.import_json(raw)

    def import_prebuilt(
        self,
        directory: Union[str, Path],
        launch_state: LaunchStateStore
    ) -> list[Plan]:
        """
        Import bundled plans on first launch only.

        Files that fail to parse or validate are logged and skipped, as are
        plans whose name is already stored. The launch flag is recorded once
        the directory has been processed.

        Args:
            directory: Directory holding ``*.json`` plan files
            launch_state: Persisted first-launch flag

        Returns:
            Plans imported by this call
        """
        if launch_state.has_run_before():
            logger.debug("Prebuilt import skipped, not first launch")
            return []

        directory = Path(directory)
        imported: list[Plan] = []

        if not directory.is_dir():
            logger.warning("Prebuilt plans directory not found", directory=str(directory))
        else:
            for path in sorted(directory.glob("*.json")):
                plan = self._import_prebuilt_file(path)
                if plan is not None:
                    imported.append(plan)

        launch_state.mark_run()
        logger.info(
            "Prebuilt plans processed",
            directory=str(directory),
            imported_count=len(imported)
        )
        return imported

    def _import_prebuilt_file(self, path: Path) -> Optional[Plan]:
        try:
            plan = self.normalizer.normalize(path.read_bytes())
            if self.store.exists(plan.name):
                logger.info("Prebuilt plan already exists, skipping", plan_name=plan.name)
                return None
            self.store.save(plan)
        except (OSError, FormatError, ValidationError, PersistenceError) as e:
            logger.warning(
                "Failed to import prebuilt plan",
                file=path.name,
                error=str(e),
                error_type=type(e).__name__
            )
            return None

        logger.info("Imported prebuilt plan", plan_name=plan.name, file=path.name)
        return plan
