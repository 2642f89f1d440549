"""Order application service.

Each use case runs in one database transaction: the order row and its
outbox entries are committed together, or neither is.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from orders.application.observability import (
    DefaultOrderServiceProbe,
    OrderServiceProbe,
)
from orders.domain.aggregates import Order
from orders.domain.value_objects import OrderId, OrderLine
from orders.ports.exceptions import OrderNotFoundError
from orders.ports.repositories import IOrderRepository


class OrderService:
    """Application service for placing and cancelling orders.

    Manages database transactions; repositories only write to the session.
    """

    def __init__(
        self,
        session: AsyncSession,
        order_repository: IOrderRepository,
        correlation_id: str | None = None,
        probe: OrderServiceProbe | None = None,
    ):
        """Initialize OrderService with dependencies.

        Args:
            session: Database session for transaction management
            order_repository: Repository for order persistence
            correlation_id: Correlation id of the current request
            probe: Optional domain probe for observability
        """
        self._session = session
        self._order_repository = order_repository
        self._correlation_id = correlation_id
        self._probe = probe or DefaultOrderServiceProbe()

    async def place_order(self, customer_id: str, lines: list[OrderLine]) -> Order:
        """Place a new order.

        Args:
            customer_id: The customer placing the order
            lines: Ordered lines

        Returns:
            The placed Order aggregate

        Raises:
            InvalidOrderError: If the order has no lines or no customer
        """
        try:
            order = Order.place(customer_id=customer_id, lines=lines)

            async with self._session.begin():
                await self._order_repository.save(
                    order, correlation_id=self._correlation_id
                )

            self._probe.order_placed(
                order_id=order.id.value,
                customer_id=customer_id,
                line_count=len(order.lines),
                total_cents=order.total_cents,
            )
            return order

        except Exception as e:
            self._probe.order_placement_failed(customer_id=customer_id, error=str(e))
            raise

    async def cancel_order(self, order_id: OrderId, reason: str) -> Order:
        """Cancel an existing order.

        The order row is locked while it is loaded, so two concurrent
        cancellations cannot both see it as placed.

        Raises:
            OrderNotFoundError: If the order does not exist
            OrderAlreadyCancelledError: If the order was already cancelled
        """
        try:
            async with self._session.begin():
                order = await self._order_repository.get_by_id(
                    order_id, for_update=True
                )
                if order is None:
                    raise OrderNotFoundError(f"Order {order_id} not found")

                order.cancel(reason)
                await self._order_repository.save(
                    order, correlation_id=self._correlation_id
                )

            self._probe.order_cancelled(order_id=order_id.value, reason=reason)
            return order

        except Exception as e:
            self._probe.order_cancellation_failed(
                order_id=order_id.value, error=str(e)
            )
            raise

    async def get_order(self, order_id: OrderId) -> Order:
        """Load an order.

        Raises:
            OrderNotFoundError: If the order does not exist
        """
        order = await self._order_repository.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(f"Order {order_id} not found")
        return order
