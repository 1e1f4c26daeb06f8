"""
Session event delivery module.

Sinks receive the events emitted by a workout session: stdout announcements,
a JSON Lines event log, or an in-process callback.
"""

from .base import BaseEventDelivery, DeliveryResult, DeliveryStatus
from .callback_delivery import CallbackEventDelivery
from .file_delivery import FileEventDelivery
from .stdout_delivery import StdoutEventDelivery, render_message

__all__ = [
    "BaseEventDelivery",
    "DeliveryResult",
    "DeliveryStatus",
    "StdoutEventDelivery",
    "FileEventDelivery",
    "CallbackEventDelivery",
    "render_message",
]
