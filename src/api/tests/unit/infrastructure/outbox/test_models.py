"""Unit tests for OutboxModel."""

from datetime import UTC, datetime
from uuid import uuid4

from infrastructure.outbox.models import OutboxModel
from shared_kernel.outbox.value_objects import OutboxEntry, OutboxStatus

ORDER_ID = "01ARZ3NDEKTSV4RRFFQ69G5FAV"


def build_model(**overrides) -> OutboxModel:
    fields = {
        "id": uuid4(),
        "aggregate_type": "order",
        "aggregate_id": ORDER_ID,
        "event_type": "OrderPlaced",
        "payload": {"order_id": ORDER_ID},
        "occurred_at": datetime(2026, 1, 9, 12, 0, 0, tzinfo=UTC),
        "processed_at": None,
        "created_at": datetime(2026, 1, 9, 12, 0, 1, tzinfo=UTC),
        "retry_count": 0,
        "last_error": None,
        "failed_at": None,
        "correlation_id": None,
    }
    fields.update(overrides)
    return OutboxModel(**fields)


class TestOutboxModelToValueObject:
    """Tests for OutboxModel.to_value_object()."""

    def test_converts_all_fields(self):
        model = build_model(correlation_id="req-1")

        entry = model.to_value_object()

        assert isinstance(entry, OutboxEntry)
        assert entry.id == model.id
        assert entry.aggregate_type == "order"
        assert entry.aggregate_id == ORDER_ID
        assert entry.event_type == "OrderPlaced"
        assert entry.payload == {"order_id": ORDER_ID}
        assert entry.occurred_at == model.occurred_at
        assert entry.created_at == model.created_at
        assert entry.correlation_id == "req-1"
        assert entry.status == OutboxStatus.PENDING

    def test_converts_failed_entry(self):
        failed_at = datetime(2026, 1, 9, 12, 10, 0, tzinfo=UTC)
        model = build_model(retry_count=5, last_error="timeout", failed_at=failed_at)

        entry = model.to_value_object()

        assert entry.retry_count == 5
        assert entry.last_error == "timeout"
        assert entry.failed_at == failed_at
        assert entry.status == OutboxStatus.FAILED

    def test_missing_retry_count_defaults_to_zero(self):
        model = build_model(retry_count=None)

        assert model.to_value_object().retry_count == 0


class TestOutboxModelTable:
    """Tests for the table definition the relay depends on."""

    def test_table_name(self):
        assert OutboxModel.__tablename__ == "outbox"

    def test_has_relay_indexes(self):
        names = {index.name for index in OutboxModel.__table__.indexes}

        assert {"idx_outbox_pending", "idx_outbox_aggregate", "idx_outbox_failed"} <= names

    def test_is_failed(self):
        assert build_model().is_failed is False
        assert build_model(failed_at=datetime.now(UTC)).is_failed is True

    def test_repr_mentions_event_type(self):
        assert "OrderPlaced" in repr(build_model())
