"""In-process callback event delivery."""

from typing import Callable

from ..state.models import SessionEvent
from .base import BaseEventDelivery, DeliveryResult, DeliveryStatus


class CallbackEventDelivery(BaseEventDelivery):
    """Hands each event to a Python callable, for embedding applications."""

    def __init__(self, callback: Callable[[SessionEvent], None], name: str = "callback"):
        super().__init__(name)
        self.callback = callback

    def deliver(self, events: list[SessionEvent]) -> list[DeliveryResult]:
        results = []

        for event in events:
            try:
                self.callback(event)
                results.append(DeliveryResult(status=DeliveryStatus.SUCCESS))
            except Exception as e:
                self.logger.error(
                    "Event callback failed",
                    delivery_name=self.name,
                    event_type=event.event_type.value,
                    error=str(e),
                    error_type=type(e).__name__
                )
                results.append(DeliveryResult(
                    status=DeliveryStatus.FAILED,
                    message=f"Callback error: {str(e)}",
                    error=e
                ))

        return self._record(results)

    def health_check(self) -> bool:
        return callable(self.callback)
