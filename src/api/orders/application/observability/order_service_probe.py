"""Protocol for order application service observability.

Defines the interface for domain probes that capture application-level
domain events for order service operations.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class OrderServiceProbe(Protocol):
    """Domain probe for order application service operations."""

    def order_placed(
        self,
        order_id: str,
        customer_id: str,
        line_count: int,
        total_cents: int,
    ) -> None:
        """Record that an order was placed."""
        ...

    def order_placement_failed(self, customer_id: str, error: str) -> None:
        """Record that placing an order failed."""
        ...

    def order_cancelled(self, order_id: str, reason: str) -> None:
        """Record that an order was cancelled."""
        ...

    def order_cancellation_failed(self, order_id: str, error: str) -> None:
        """Record that cancelling an order failed."""
        ...


class DefaultOrderServiceProbe:
    """Default implementation of OrderServiceProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def order_placed(
        self,
        order_id: str,
        customer_id: str,
        line_count: int,
        total_cents: int,
    ) -> None:
        """Record that an order was placed."""
        self._logger.info(
            "order_placed",
            order_id=order_id,
            customer_id=customer_id,
            line_count=line_count,
            total_cents=total_cents,
        )

    def order_placement_failed(self, customer_id: str, error: str) -> None:
        """Record that placing an order failed."""
        self._logger.error(
            "order_placement_failed",
            customer_id=customer_id,
            error=error,
        )

    def order_cancelled(self, order_id: str, reason: str) -> None:
        """Record that an order was cancelled."""
        self._logger.info("order_cancelled", order_id=order_id, reason=reason)

    def order_cancellation_failed(self, order_id: str, error: str) -> None:
        """Record that cancelling an order failed."""
        self._logger.error(
            "order_cancellation_failed",
            order_id=order_id,
            error=error,
        )
