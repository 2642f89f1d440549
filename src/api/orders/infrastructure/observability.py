"""Domain probe for order repository operations."""

from __future__ import annotations

from typing import Protocol

import structlog


class OrderRepositoryProbe(Protocol):
    """Domain probe for order repository operations."""

    def order_saved(self, order_id: str, event_count: int) -> None:
        """Record that an order and its events were written to the session."""
        ...

    def order_retrieved(self, order_id: str) -> None:
        """Record that an order was retrieved."""
        ...

    def order_not_found(self, order_id: str) -> None:
        """Record that an order was not found."""
        ...


class DefaultOrderRepositoryProbe:
    """Default implementation of OrderRepositoryProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def order_saved(self, order_id: str, event_count: int) -> None:
        self._logger.debug(
            "order_saved",
            order_id=order_id,
            event_count=event_count,
        )

    def order_retrieved(self, order_id: str) -> None:
        self._logger.debug("order_retrieved", order_id=order_id)

    def order_not_found(self, order_id: str) -> None:
        self._logger.debug("order_not_found", order_id=order_id)
