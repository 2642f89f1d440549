"""Orders event translator for broker messages.

Maps outbox payloads to the public messages published on the "orders"
stream. Public bodies name fields explicitly so internal event fields can
change without breaking consumers.
"""

from __future__ import annotations

from typing import Any, get_args

from orders.domain.events import DomainEvent
from shared_kernel.outbox.value_objects import OutboundMessage

ORDERS_STREAM = "orders"

_SUPPORTED_EVENTS: frozenset[str] = frozenset(
    cls.__name__ for cls in get_args(DomainEvent)
)


class OrdersMessageTranslator:
    """Translates Orders domain events to broker messages.

    Messages are keyed by order id so consumers can partition per order.
    """

    def supported_event_types(self) -> frozenset[str]:
        """Return the event type names this translator handles."""
        return _SUPPORTED_EVENTS

    def translate(
        self,
        event_type: str,
        payload: dict[str, Any],
    ) -> list[OutboundMessage]:
        """Convert an event payload to broker messages.

        Raises:
            ValueError: If the event type is not supported
        """
        match event_type:
            case "OrderPlaced":
                return self._translate_order_placed(payload)
            case "OrderCancelled":
                return self._translate_order_cancelled(payload)
            case _:
                raise ValueError(f"Unsupported event type: {event_type}")

    def _translate_order_placed(self, payload: dict[str, Any]) -> list[OutboundMessage]:
        return [
            OutboundMessage(
                stream=ORDERS_STREAM,
                key=payload["order_id"],
                body={
                    "type": "order.placed",
                    "order_id": payload["order_id"],
                    "customer_id": payload["customer_id"],
                    "total_cents": payload["total_cents"],
                    "lines": [
                        {
                            "sku": line["sku"],
                            "quantity": line["quantity"],
                            "unit_price_cents": line["unit_price_cents"],
                        }
                        for line in payload["lines"]
                    ],
                },
            )
        ]

    def _translate_order_cancelled(
        self, payload: dict[str, Any]
    ) -> list[OutboundMessage]:
        return [
            OutboundMessage(
                stream=ORDERS_STREAM,
                key=payload["order_id"],
                body={
                    "type": "order.cancelled",
                    "order_id": payload["order_id"],
                    "customer_id": payload["customer_id"],
                    "reason": payload["reason"],
                },
            )
        ]
