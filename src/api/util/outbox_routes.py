"""Operator routes for the outbox dead letter queue.

Entries land in the DLQ after exhausting their publish retries. These
routes list them and put them back in line once the cause is fixed.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from infrastructure.outbox.dependencies import get_outbox_reader, get_outbox_repository
from infrastructure.outbox.repository import OutboxRepository
from shared_kernel.outbox.value_objects import OutboxEntry

logger = structlog.get_logger()

router = APIRouter(prefix="/outbox", tags=["outbox"])


class FailedEntryResponse(BaseModel):
    """A dead-lettered outbox entry."""

    id: UUID
    aggregate_type: str
    aggregate_id: str
    event_type: str
    payload: dict[str, Any]
    correlation_id: str | None
    occurred_at: datetime
    created_at: datetime
    retry_count: int
    last_error: str | None
    failed_at: datetime | None

    @classmethod
    def from_entry(cls, entry: OutboxEntry) -> FailedEntryResponse:
        return cls(
            id=entry.id,
            aggregate_type=entry.aggregate_type,
            aggregate_id=entry.aggregate_id,
            event_type=entry.event_type,
            payload=entry.payload,
            correlation_id=entry.correlation_id,
            occurred_at=entry.occurred_at,
            created_at=entry.created_at,
            retry_count=entry.retry_count,
            last_error=entry.last_error,
            failed_at=entry.failed_at,
        )


class RequeueResponse(BaseModel):
    """Result of a requeue request."""

    id: UUID
    requeued: bool


@router.get("/failed")
async def list_failed_entries(
    outbox: Annotated[OutboxRepository, Depends(get_outbox_reader)],
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> list[FailedEntryResponse]:
    """List dead-lettered entries, most recent failure first."""
    try:
        entries = await outbox.list_failed(limit=limit)
        return [FailedEntryResponse.from_entry(entry) for entry in entries]

    except Exception as e:
        logger.error("outbox_failed_listing_error", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list failed outbox entries",
        )


@router.post("/{entry_id}/requeue")
async def requeue_entry(
    entry_id: UUID,
    session: Annotated[AsyncSession, Depends(get_write_session)],
    outbox: Annotated[OutboxRepository, Depends(get_outbox_repository)],
) -> RequeueResponse:
    """Reset a dead-lettered entry so the relay publishes it again.

    The retry budget starts over.

    Raises:
        HTTPException: 404 if no dead-lettered entry has this id
        HTTPException: 500 for unexpected errors
    """
    try:
        async with session.begin():
            requeued = await outbox.requeue(entry_id)

    except Exception as e:
        logger.error("outbox_requeue_error", entry_id=str(entry_id), error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to requeue outbox entry",
        )

    if not requeued:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Failed outbox entry not found",
        )

    logger.info("outbox_entry_requeued", entry_id=str(entry_id))
    return RequeueResponse(id=entry_id, requeued=True)
