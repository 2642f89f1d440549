"""FastAPI dependencies for the Orders context."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from infrastructure.outbox.composite import CompositeSerializer
from infrastructure.outbox.dependencies import (
    get_event_serializer,
    get_outbox_repository,
)
from infrastructure.outbox.repository import OutboxRepository
from orders.application.observability import (
    DefaultOrderServiceProbe,
    OrderServiceProbe,
)
from orders.application.services import OrderService
from orders.infrastructure.repository import OrderRepository
from shared_kernel.middleware import get_correlation_id


def get_order_service_probe() -> OrderServiceProbe:
    """Get OrderServiceProbe instance."""
    return DefaultOrderServiceProbe()


def get_order_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    outbox: Annotated[OutboxRepository, Depends(get_outbox_repository)],
    serializer: Annotated[CompositeSerializer, Depends(get_event_serializer)],
) -> OrderRepository:
    """Get OrderRepository instance.

    FastAPI caches get_write_session per request, so the order repository
    and the outbox repository share one session and one transaction.

    Args:
        session: Async database session
        outbox: Outbox repository on the same session
        serializer: Composite serializer with the Orders serializer registered

    Returns:
        OrderRepository instance
    """
    return OrderRepository(session=session, outbox=outbox, serializer=serializer)


async def get_order_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    order_repository: Annotated[OrderRepository, Depends(get_order_repository)],
    probe: Annotated[OrderServiceProbe, Depends(get_order_service_probe)],
) -> OrderService:
    """Get OrderService instance scoped to the current request.

    The correlation id is the one CorrelationIdMiddleware bound to the
    current request.
    """
    return OrderService(
        session=session,
        order_repository=order_repository,
        correlation_id=get_correlation_id(),
        probe=probe,
    )
