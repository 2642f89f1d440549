"""Unit tests for Orders value objects."""

import pytest

from orders.domain import InvalidOrderError, OrderId, OrderLine


class TestOrderId:
    def test_generate_produces_valid_ulid(self):
        order_id = OrderId.generate()

        assert OrderId.from_string(order_id.value) == order_id
        assert len(str(order_id)) == 26

    def test_from_string_rejects_invalid_value(self):
        with pytest.raises(ValueError, match="Invalid OrderId"):
            OrderId.from_string("not-a-ulid")


class TestOrderLine:
    def test_total(self):
        assert OrderLine(sku="A", quantity=3, unit_price_cents=199).total_cents == 597

    def test_free_items_are_allowed(self):
        assert OrderLine(sku="A", quantity=1, unit_price_cents=0).total_cents == 0

    @pytest.mark.parametrize(
        "sku, quantity, unit_price_cents",
        [("", 1, 100), ("A", 0, 100), ("A", -1, 100), ("A", 1, -1)],
    )
    def test_rejects_invalid_lines(self, sku, quantity, unit_price_cents):
        with pytest.raises(InvalidOrderError):
            OrderLine(sku=sku, quantity=quantity, unit_price_cents=unit_price_cents)

    def test_invalid_order_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            OrderLine(sku="", quantity=1, unit_price_cents=1)
