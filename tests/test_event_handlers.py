"""
Tests for `services/event_handlers.py`.

Covers:
- The logging sink writes one INFO line per sale notification.
- The recording sink keeps events in publication order.
"""

from __future__ import annotations

import logging
from uuid import UUID

import pytest

from domain.events import ItemCancelled, SaleCancelled, SaleModified, SaleRegistered
from services.event_handlers import LoggingEventSink, RecordingEventSink

SALE_ID = UUID(int=1)
ITEM_ID = UUID(int=101)


def test_logging_sink_logs_each_event(caplog: pytest.LogCaptureFixture) -> None:
    sink = LoggingEventSink()

    with caplog.at_level(logging.INFO, logger="services.event_handlers"):
        sink.publish(SaleRegistered(sale_id=SALE_ID))
        sink.publish(SaleModified(sale_id=SALE_ID))
        sink.publish(SaleCancelled(sale_id=SALE_ID))
        sink.publish(ItemCancelled(sale_id=SALE_ID, item_id=ITEM_ID))

    messages = [record.getMessage() for record in caplog.records]
    assert messages == [
        f"Sale registered event: sale_id={SALE_ID}",
        f"Sale modified event: sale_id={SALE_ID}",
        f"Sale cancelled event: sale_id={SALE_ID}",
        f"Item cancelled event: sale_id={SALE_ID} item_id={ITEM_ID}",
    ]
    assert all(record.levelno == logging.INFO for record in caplog.records)


def test_recording_sink_keeps_order() -> None:
    sink = RecordingEventSink()

    sink.publish(SaleRegistered(sale_id=SALE_ID))
    sink.publish(SaleCancelled(sale_id=SALE_ID))

    assert sink.events == [SaleRegistered(sale_id=SALE_ID), SaleCancelled(sale_id=SALE_ID)]
