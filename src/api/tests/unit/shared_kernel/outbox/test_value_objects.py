"""Unit tests for outbox value objects."""

from dataclasses import FrozenInstanceError
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from shared_kernel.outbox.value_objects import (
    OutboundMessage,
    OutboxEntry,
    OutboxStatus,
)

ORDER_ID = "01ARZ3NDEKTSV4RRFFQ69G5FAV"


def build_entry(**overrides) -> OutboxEntry:
    now = datetime.now(UTC)
    fields = {
        "id": uuid4(),
        "aggregate_type": "order",
        "aggregate_id": ORDER_ID,
        "event_type": "OrderPlaced",
        "payload": {"order_id": ORDER_ID},
        "occurred_at": now,
        "processed_at": None,
        "created_at": now,
    }
    fields.update(overrides)
    return OutboxEntry(**fields)


class TestOutboxEntry:
    """Tests for OutboxEntry value object."""

    def test_retry_fields_default_to_fresh_entry(self):
        entry = build_entry()

        assert entry.retry_count == 0
        assert entry.last_error is None
        assert entry.failed_at is None
        assert entry.correlation_id is None

    def test_is_immutable(self):
        entry = build_entry()

        with pytest.raises(FrozenInstanceError):
            entry.event_type = "OrderCancelled"

    def test_pending_status(self):
        entry = build_entry()

        assert entry.status == OutboxStatus.PENDING
        assert entry.is_processed is False
        assert entry.is_failed is False

    def test_processed_status(self):
        entry = build_entry(processed_at=datetime.now(UTC))

        assert entry.status == OutboxStatus.PROCESSED
        assert entry.is_processed is True

    def test_failed_status(self):
        entry = build_entry(failed_at=datetime.now(UTC), retry_count=5)

        assert entry.status == OutboxStatus.FAILED
        assert entry.is_failed is True


class TestOutboundMessage:
    """Tests for OutboundMessage value object."""

    def test_headers_default_to_empty(self):
        message = OutboundMessage(stream="orders", key=ORDER_ID, body={})

        assert message.headers == {}

    def test_with_headers_returns_new_message(self):
        message = OutboundMessage(
            stream="orders", key=ORDER_ID, body={"a": 1}, headers={"x": "1"}
        )

        enriched = message.with_headers(message_id="m-1", x="2")

        assert enriched.headers == {"x": "2", "message_id": "m-1"}
        assert enriched.body == {"a": 1}
        assert message.headers == {"x": "1"}
