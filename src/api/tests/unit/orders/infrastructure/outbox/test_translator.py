"""Unit tests for OrdersMessageTranslator."""

import pytest

from orders.infrastructure.outbox import ORDERS_STREAM, OrdersMessageTranslator

ORDER_ID = "01ARZ3NDEKTSV4RRFFQ69G5FAV"


@pytest.fixture
def translator() -> OrdersMessageTranslator:
    return OrdersMessageTranslator()


class TestOrdersMessageTranslator:
    def test_order_placed(self, translator):
        messages = translator.translate(
            "OrderPlaced",
            {
                "order_id": ORDER_ID,
                "customer_id": "cust-1",
                "lines": [{"sku": "SKU-1", "quantity": 2, "unit_price_cents": 500}],
                "total_cents": 1000,
                "occurred_at": "2026-01-08T12:00:00+00:00",
            },
        )

        assert len(messages) == 1
        message = messages[0]
        assert message.stream == ORDERS_STREAM
        assert message.key == ORDER_ID
        assert message.body == {
            "type": "order.placed",
            "order_id": ORDER_ID,
            "customer_id": "cust-1",
            "total_cents": 1000,
            "lines": [{"sku": "SKU-1", "quantity": 2, "unit_price_cents": 500}],
        }

    def test_order_cancelled(self, translator):
        messages = translator.translate(
            "OrderCancelled",
            {
                "order_id": ORDER_ID,
                "customer_id": "cust-1",
                "reason": "duplicate",
                "occurred_at": "2026-01-08T12:00:00+00:00",
            },
        )

        assert messages[0].body == {
            "type": "order.cancelled",
            "order_id": ORDER_ID,
            "customer_id": "cust-1",
            "reason": "duplicate",
        }

    def test_internal_fields_are_not_published(self, translator):
        messages = translator.translate(
            "OrderCancelled",
            {
                "order_id": ORDER_ID,
                "customer_id": "cust-1",
                "reason": "",
                "occurred_at": "2026-01-08T12:00:00+00:00",
            },
        )

        assert "occurred_at" not in messages[0].body

    def test_unknown_event_type_raises(self, translator):
        with pytest.raises(ValueError, match="Unsupported event type"):
            translator.translate("ParcelShipped", {})

    def test_supports_every_domain_event(self, translator):
        assert translator.supported_event_types() == frozenset(
            {"OrderPlaced", "OrderCancelled"}
        )
