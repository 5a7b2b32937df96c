"""
Sale event sinks.

Sale notifications are observational: the default sink writes one log line
per event. `RecordingEventSink` keeps events in memory for inspection.
"""

from __future__ import annotations

import logging
from typing import List, Protocol

from domain.events import (
    ItemCancelled,
    SaleCancelled,
    SaleEvent,
    SaleModified,
    SaleRegistered,
)

logger = logging.getLogger(__name__)


class EventSink(Protocol):
    def publish(self, event: SaleEvent) -> None:
        ...


class LoggingEventSink:
    """Log every sale notification at INFO."""

    def publish(self, event: SaleEvent) -> None:
        if isinstance(event, SaleRegistered):
            logger.info("Sale registered event: sale_id=%s", event.sale_id)
        elif isinstance(event, SaleModified):
            logger.info("Sale modified event: sale_id=%s", event.sale_id)
        elif isinstance(event, SaleCancelled):
            logger.info("Sale cancelled event: sale_id=%s", event.sale_id)
        elif isinstance(event, ItemCancelled):
            logger.info(
                "Item cancelled event: sale_id=%s item_id=%s",
                event.sale_id,
                event.item_id,
            )
        else:
            logger.warning("Unhandled sale event: %r", event)


class RecordingEventSink:
    def __init__(self) -> None:
        self.events: List[SaleEvent] = []

    def publish(self, event: SaleEvent) -> None:
        self.events.append(event)


__all__ = [
    "EventSink",
    "LoggingEventSink",
    "RecordingEventSink",
]
