"""Application layer for the Orders context."""

from orders.application.services import OrderService

__all__ = ["OrderService"]
