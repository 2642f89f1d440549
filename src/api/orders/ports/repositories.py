"""Repository protocols (ports) for the Orders bounded context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from orders.domain.aggregates import Order
from orders.domain.value_objects import OrderId


@runtime_checkable
class IOrderRepository(Protocol):
    """Repository for Order aggregate persistence.

    save() writes the order and its collected domain events to the outbox
    on the caller's session. It never commits.
    """

    async def save(self, order: Order, correlation_id: str | None = None) -> None:
        """Persist an order and append its pending events to the outbox.

        Args:
            order: The Order aggregate to persist
            correlation_id: Correlation id stored on the outbox entries
        """
        ...

    async def get_by_id(
        self, order_id: OrderId, for_update: bool = False
    ) -> Order | None:
        """Retrieve an order by its ID.

        With for_update the order row stays locked until the caller's
        transaction ends.

        Returns:
            The Order aggregate, or None if not found
        """
        ...
