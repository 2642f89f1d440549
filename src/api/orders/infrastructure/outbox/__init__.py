"""Orders outbox infrastructure.

Contains the serializer and translator for Orders domain events. These are
registered with the composite handlers at application startup.
"""

from orders.infrastructure.outbox.serializer import OrdersEventSerializer
from orders.infrastructure.outbox.translator import (
    ORDERS_STREAM,
    OrdersMessageTranslator,
)

__all__ = ["ORDERS_STREAM", "OrdersEventSerializer", "OrdersMessageTranslator"]
