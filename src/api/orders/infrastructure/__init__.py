"""Infrastructure layer for the Orders context."""

from orders.infrastructure.models import OrderModel
from orders.infrastructure.repository import OrderRepository

__all__ = ["OrderModel", "OrderRepository"]
