"""Pydantic models for order API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from orders.domain.aggregates import Order
from orders.domain.value_objects import OrderLine


class OrderLineRequest(BaseModel):
    """A requested order line."""

    sku: str = Field(..., min_length=1, max_length=64, description="Stock keeping unit")
    quantity: int = Field(..., gt=0, description="Number of units")
    unit_price_cents: int = Field(..., ge=0, description="Unit price in cents")

    def to_domain(self) -> OrderLine:
        return OrderLine(
            sku=self.sku,
            quantity=self.quantity,
            unit_price_cents=self.unit_price_cents,
        )


class PlaceOrderRequest(BaseModel):
    """Request model for placing an order."""

    customer_id: str = Field(
        ..., min_length=1, max_length=255, description="Customer identifier"
    )
    lines: list[OrderLineRequest] = Field(
        ..., min_length=1, description="Ordered lines (at least one)"
    )


class CancelOrderRequest(BaseModel):
    """Request model for cancelling an order."""

    reason: str = Field(
        default="", max_length=1000, description="Why the order is cancelled"
    )


class OrderLineResponse(BaseModel):
    """Response model for an order line."""

    sku: str
    quantity: int
    unit_price_cents: int


class OrderResponse(BaseModel):
    """Response model for an order."""

    id: str = Field(..., description="Order ID (ULID)")
    customer_id: str
    status: str
    lines: list[OrderLineResponse]
    total_cents: int
    placed_at: datetime
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None

    @classmethod
    def from_domain(cls, order: Order) -> OrderResponse:
        """Convert domain Order aggregate to API response.

        Args:
            order: Order domain aggregate

        Returns:
            OrderResponse
        """
        return cls(
            id=order.id.value,
            customer_id=order.customer_id,
            status=order.status.value,
            lines=[
                OrderLineResponse(
                    sku=line.sku,
                    quantity=line.quantity,
                    unit_price_cents=line.unit_price_cents,
                )
                for line in order.lines
            ],
            total_cents=order.total_cents,
            placed_at=order.placed_at,
            cancelled_at=order.cancelled_at,
            cancellation_reason=order.cancellation_reason,
        )
