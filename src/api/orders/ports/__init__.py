"""Ports (interfaces) for the Orders bounded context.

Ports define the contracts for repositories without specifying
implementation details.
"""

from orders.ports.exceptions import (
    InvalidOrderError,
    OrderAlreadyCancelledError,
    OrderNotFoundError,
)
from orders.ports.repositories import IOrderRepository

__all__ = [
    "IOrderRepository",
    "InvalidOrderError",
    "OrderAlreadyCancelledError",
    "OrderNotFoundError",
]
