"""Observability probes for the Orders application layer."""

from orders.application.observability.order_service_probe import (
    DefaultOrderServiceProbe,
    OrderServiceProbe,
)

__all__ = ["DefaultOrderServiceProbe", "OrderServiceProbe"]
