"""Order aggregate for the Orders context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from orders.domain.events import OrderCancelled, OrderLineSnapshot, OrderPlaced
from orders.domain.exceptions import InvalidOrderError, OrderAlreadyCancelledError
from orders.domain.value_objects import OrderId, OrderLine, OrderStatus

if TYPE_CHECKING:
    from orders.domain.events import DomainEvent


@dataclass
class Order:
    """Order aggregate.

    Business rules:
    - An order has at least one line
    - A cancelled order cannot be cancelled again

    Event collection:
    - place() and cancel() record domain events
    - Events are drained via collect_events() and written to the outbox
    """

    id: OrderId
    customer_id: str
    lines: list[OrderLine]
    status: OrderStatus = OrderStatus.PLACED
    placed_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    _pending_events: list[DomainEvent] = field(default_factory=list, repr=False)

    @classmethod
    def place(cls, customer_id: str, lines: list[OrderLine]) -> "Order":
        """Factory method for placing a new order.

        Args:
            customer_id: The customer placing the order
            lines: The ordered lines

        Returns:
            A new Order aggregate with OrderPlaced recorded

        Raises:
            InvalidOrderError: If the customer is missing or there are no lines
        """
        if not customer_id:
            raise InvalidOrderError("Order requires a customer")
        if not lines:
            raise InvalidOrderError("Order requires at least one line")

        now = datetime.now(UTC)
        order = cls(
            id=OrderId.generate(),
            customer_id=customer_id,
            lines=list(lines),
            placed_at=now,
        )
        order._pending_events.append(
            OrderPlaced(
                order_id=order.id.value,
                customer_id=customer_id,
                lines=tuple(
                    OrderLineSnapshot(
                        sku=line.sku,
                        quantity=line.quantity,
                        unit_price_cents=line.unit_price_cents,
                    )
                    for line in order.lines
                ),
                total_cents=order.total_cents,
                occurred_at=now,
            )
        )
        return order

    @property
    def total_cents(self) -> int:
        return sum(line.total_cents for line in self.lines)

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED

    def cancel(self, reason: str) -> None:
        """Cancel the order.

        Args:
            reason: Why the order is cancelled

        Raises:
            OrderAlreadyCancelledError: If the order was already cancelled
        """
        if self.is_cancelled:
            raise OrderAlreadyCancelledError(f"Order {self.id} is already cancelled")

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED
        self.cancelled_at = now
        self.cancellation_reason = reason
        self._pending_events.append(
            OrderCancelled(
                order_id=self.id.value,
                customer_id=self.customer_id,
                reason=reason,
                occurred_at=now,
            )
        )

    def collect_events(self) -> list[DomainEvent]:
        """Return and clear pending domain events.

        Returns:
            List of domain events recorded since the last collection
        """
        events = self._pending_events.copy()
        self._pending_events.clear()
        return events
