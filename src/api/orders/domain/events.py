"""Domain events for the Orders bounded context.

Domain events capture facts about things that have happened to an order.
They are written to the outbox in the same transaction as the order itself
and published to the broker by the outbox relay.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class OrderLineSnapshot:
    """Immutable copy of an order line carried inside events."""

    sku: str
    quantity: int
    unit_price_cents: int


@dataclass(frozen=True)
class OrderPlaced:
    """Event raised when a customer places an order.

    Attributes:
        order_id: The ULID of the order
        customer_id: The customer who placed it
        lines: Snapshot of the ordered lines
        total_cents: Order total in cents
        occurred_at: When the event occurred (UTC)
    """

    order_id: str
    customer_id: str
    lines: tuple[OrderLineSnapshot, ...]
    total_cents: int
    occurred_at: datetime


@dataclass(frozen=True)
class OrderCancelled:
    """Event raised when an order is cancelled.

    Attributes:
        order_id: The ULID of the order
        customer_id: The customer who placed it
        reason: Free-text cancellation reason
        occurred_at: When the event occurred (UTC)
    """

    order_id: str
    customer_id: str
    reason: str
    occurred_at: datetime


# Type alias for all domain events in the Orders context
DomainEvent = OrderPlaced | OrderCancelled
