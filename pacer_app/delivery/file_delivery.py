"""File-based event delivery mechanism writing JSON Lines."""

import fcntl
import json
from pathlib import Path
from typing import Any, Optional, Union

from ..state.models import SessionEvent
from ..utils.time import format_timestamp, utc_now
from .base import BaseEventDelivery, DeliveryResult, DeliveryStatus


class FileEventDelivery(BaseEventDelivery):
    """Appends one JSON object per event to a log file."""

    def __init__(
        self,
        output_path: Union[str, Path],
        name: str = "file",
        create_dirs: bool = True,
        extra_fields: Optional[dict[str, Any]] = None
    ):
        """
        Initialize the file sink.

        Args:
            output_path: JSONL file to append to
            name: Sink name used in logs
            create_dirs: Create missing parent directories
            extra_fields: Fields merged into every record, such as a session id
        """
        super().__init__(name)
        self.output_path = Path(output_path).expanduser()
        self.extra_fields = dict(extra_fields or {})

        if create_dirs:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)

    def deliver(self, events: list[SessionEvent]) -> list[DeliveryResult]:
        """Deliver events to file."""
        if not events:
            return []

        try:
            self._write_jsonl_format([self._to_record(event) for event in events])

        except OSError as e:
            self.logger.warning(
                "Event delivery file error",
                delivery_name=self.name,
                output_path=str(self.output_path),
                error=str(e)
            )
            return self._record([DeliveryResult(
                status=DeliveryStatus.FAILED,
                message=f"File system error: {str(e)}",
                error=e
            ) for _ in events])

        self.logger.debug(
            "Events written to file",
            delivery_name=self.name,
            event_count=len(events),
            output_path=str(self.output_path)
        )
        return self._record([DeliveryResult(
            status=DeliveryStatus.SUCCESS,
            message=f"Written to {self.output_path}"
        ) for _ in events])

    def _to_record(self, event: SessionEvent) -> dict[str, Any]:
        record = dict(self.extra_fields)
        record.update(event.to_dict())
        record["logged_at"] = format_timestamp(utc_now())
        return record

    def _write_jsonl_format(self, records: list[dict[str, Any]]) -> None:
        """Write records in JSONL format (one JSON object per line)."""
        with open(self.output_path, 'a') as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            for record in records:
                json.dump(record, f, default=str)
                f.write('\n')

    def health_check(self) -> bool:
        """Check if file system is writable."""
        try:
            test_file = self.output_path.parent / ".health_check_test"
            test_file.write_text("test")
            test_file.unlink()
            return True

        except OSError as e:
            self.logger.warning(
                "Health check failed",
                delivery_name=self.name,
                error=str(e)
            )
            return False
