"""FastAPI dependencies for the outbox infrastructure."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_read_session, get_write_session
from infrastructure.outbox.composite import CompositeSerializer
from infrastructure.outbox.repository import OutboxRepository


@lru_cache
def get_event_serializer() -> CompositeSerializer:
    """Get the process-wide composite event serializer.

    Bounded contexts register their serializers on it at application
    startup (see main.py).
    """
    return CompositeSerializer()


def get_outbox_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> OutboxRepository:
    """Get OutboxRepository bound to the request's write session.

    The repository accepts pre-serialized payloads, making it context-agnostic.
    Serialization is handled by the bounded context's repository.
    """
    return OutboxRepository(session=session)


def get_outbox_reader(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> OutboxRepository:
    """Get OutboxRepository on a read session, for stats and listings."""
    return OutboxRepository(session=session)
