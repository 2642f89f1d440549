"""Domain layer for the Orders context."""

from orders.domain.aggregates import Order
from orders.domain.events import (
    DomainEvent,
    OrderCancelled,
    OrderLineSnapshot,
    OrderPlaced,
)
from orders.domain.exceptions import InvalidOrderError, OrderAlreadyCancelledError
from orders.domain.value_objects import OrderId, OrderLine, OrderStatus

__all__ = [
    "DomainEvent",
    "InvalidOrderError",
    "OrderAlreadyCancelledError",
    "Order",
    "OrderCancelled",
    "OrderId",
    "OrderLine",
    "OrderLineSnapshot",
    "OrderPlaced",
    "OrderStatus",
]
