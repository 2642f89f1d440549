"""PostgreSQL implementation of IOrderRepository.

Writes use the transactional outbox pattern: domain events are collected
from the aggregate and appended to the outbox table on the same session,
so they commit or roll back together with the order row.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orders.domain.aggregates import Order
from orders.domain.value_objects import OrderId, OrderLine, OrderStatus
from orders.infrastructure.models import OrderModel
from orders.infrastructure.observability import (
    DefaultOrderRepositoryProbe,
    OrderRepositoryProbe,
)
from orders.infrastructure.outbox.serializer import OrdersEventSerializer
from orders.ports.repositories import IOrderRepository

if TYPE_CHECKING:
    from shared_kernel.outbox.ports import EventSerializer, IOutboxRepository

AGGREGATE_TYPE = "order"


class OrderRepository(IOrderRepository):
    """Repository persisting Order aggregates and their outbox entries.

    Like the outbox repository it writes through, this repository never
    commits; the application service owns the transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        outbox: IOutboxRepository,
        serializer: EventSerializer | None = None,
        probe: OrderRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session and outbox.

        Args:
            session: AsyncSession shared with the outbox repository
            outbox: Outbox repository bound to the same session
            serializer: Event serializer (default: OrdersEventSerializer)
            probe: Optional domain probe for observability
        """
        self._session = session
        self._outbox = outbox
        self._serializer = serializer or OrdersEventSerializer()
        self._probe = probe or DefaultOrderRepositoryProbe()

    async def save(self, order: Order, correlation_id: str | None = None) -> None:
        """Upsert the order row, then append its collected events to the outbox.

        Args:
            order: The Order aggregate to persist
            correlation_id: Correlation id stored on the outbox entries
        """
        stmt = select(OrderModel).where(OrderModel.id == order.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            model = OrderModel(id=order.id.value)
            self._session.add(model)

        model.customer_id = order.customer_id
        model.status = order.status.value
        model.lines = [
            {
                "sku": line.sku,
                "quantity": line.quantity,
                "unit_price_cents": line.unit_price_cents,
            }
            for line in order.lines
        ]
        model.total_cents = order.total_cents
        model.placed_at = order.placed_at
        model.cancelled_at = order.cancelled_at
        model.cancellation_reason = order.cancellation_reason

        # Flush to catch integrity errors before outbox writes
        await self._session.flush()

        events = order.collect_events()
        for event in events:
            await self._outbox.append(
                event_type=type(event).__name__,
                payload=self._serializer.serialize(event),
                occurred_at=event.occurred_at,
                aggregate_type=AGGREGATE_TYPE,
                aggregate_id=order.id.value,
                correlation_id=correlation_id,
            )

        self._probe.order_saved(order.id.value, len(events))

    async def get_by_id(
        self, order_id: OrderId, for_update: bool = False
    ) -> Order | None:
        """Load an order by id.

        Args:
            order_id: The unique identifier of the order
            for_update: Lock the row (SELECT ... FOR UPDATE) until the
                transaction ends

        Returns:
            The Order aggregate, or None if not found
        """
        stmt = select(OrderModel).where(OrderModel.id == order_id.value)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.order_not_found(order_id.value)
            return None

        self._probe.order_retrieved(order_id.value)
        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: OrderModel) -> Order:
        return Order(
            id=OrderId(value=model.id),
            customer_id=model.customer_id,
            lines=[OrderLine(**line) for line in model.lines],
            status=OrderStatus(model.status),
            placed_at=model.placed_at,
            cancelled_at=model.cancelled_at,
            cancellation_reason=model.cancellation_reason,
        )
