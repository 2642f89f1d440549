"""Outbox repository implementation.

This module provides the PostgreSQL implementation of the outbox repository.
It handles persisting domain events to the outbox table and the state
transitions the relay applies after publishing.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.outbox.models import OutboxModel
from shared_kernel.outbox.value_objects import OutboxEntry, OutboxStats

_PENDING = and_(OutboxModel.processed_at.is_(None), OutboxModel.failed_at.is_(None))


class OutboxRepository:
    """PostgreSQL implementation of the outbox repository.

    This repository shares the same database session as the calling service,
    ensuring that event appends happen within the same transaction as the
    aggregate changes. This is critical for the atomicity guarantee of the
    outbox pattern.

    The repository only calls session.add(), session.execute() and
    session.flush() - it never calls session.commit(). The caller owns the
    transaction boundary (the writing service, or the relay per batch).
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a session.

        Args:
            session: The SQLAlchemy async session (shared with calling service)
        """
        self._session = session

    async def append(
        self,
        event_type: str,
        payload: dict[str, Any],
        occurred_at: datetime,
        aggregate_type: str,
        aggregate_id: str,
        correlation_id: str | None = None,
    ) -> None:
        """Append a pre-serialized event to the outbox within the current transaction.

        Args:
            event_type: Name of the domain event type (e.g., "OrderPlaced")
            payload: Pre-serialized event data
            occurred_at: When the domain event occurred
            aggregate_type: Type of aggregate (e.g., "order")
            aggregate_id: ULID of the aggregate
            correlation_id: Correlation id of the originating request
        """
        model = OutboxModel(
            aggregate_type=aggregate_type,
            aggregate_id=aggregate_id,
            event_type=event_type,
            payload=payload,
            correlation_id=correlation_id,
            occurred_at=occurred_at,
            processed_at=None,
        )

        self._session.add(model)

    async def fetch_unprocessed(self, limit: int = 100) -> list[OutboxEntry]:
        """Fetch pending entries ordered by creation time.

        Uses FOR UPDATE SKIP LOCKED for safe concurrent access when multiple
        relays are running. This ensures that each relay processes different
        entries and no entry is published twice concurrently.

        Args:
            limit: Maximum number of entries to fetch

        Returns:
            List of pending OutboxEntry value objects
        """
        stmt = (
            select(OutboxModel)
            .where(_PENDING)
            .order_by(OutboxModel.created_at, OutboxModel.id)
            .limit(limit)
            .with_for_update(skip_locked=True)
        )

        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [model.to_value_object() for model in models]

    async def fetch_unprocessed_by_id(self, entry_id: UUID) -> OutboxEntry | None:
        """Fetch and lock a single pending entry (NOTIFY path).

        Args:
            entry_id: The UUID of the entry

        Returns:
            The entry, or None if missing, already handled, or locked elsewhere
        """
        stmt = (
            select(OutboxModel)
            .where(OutboxModel.id == entry_id)
            .where(_PENDING)
            .with_for_update(skip_locked=True)
        )

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        return model.to_value_object() if model is not None else None

    async def mark_processed(self, entry_id: UUID) -> None:
        """Mark an entry as processed.

        Sets the processed_at timestamp to the current UTC time.

        Args:
            entry_id: The UUID of the entry to mark as processed
        """
        stmt = (
            update(OutboxModel)
            .where(OutboxModel.id == entry_id)
            .values(processed_at=datetime.now(UTC))
        )

        await self._session.execute(stmt)

    async def record_failure(
        self, entry_id: UUID, retry_count: int, error: str
    ) -> None:
        """Store a failed attempt. The entry is retried on the next cycle.

        Args:
            entry_id: The entry to update
            retry_count: The new retry count
            error: The error that caused the failure
        """
        stmt = (
            update(OutboxModel)
            .where(OutboxModel.id == entry_id)
            .values(retry_count=retry_count, last_error=error)
        )
        await self._session.execute(stmt)

    async def move_to_dlq(self, entry_id: UUID, retry_count: int, error: str) -> None:
        """Move an entry to the dead letter queue.

        Sets failed_at to mark the entry as permanently failed.
        The entry will no longer be picked up by polling.

        Args:
            entry_id: The entry to move to DLQ
            retry_count: The final retry count
            error: The error that caused the failure
        """
        stmt = (
            update(OutboxModel)
            .where(OutboxModel.id == entry_id)
            .values(
                retry_count=retry_count,
                last_error=error,
                failed_at=datetime.now(UTC),
            )
        )
        await self._session.execute(stmt)

    async def requeue(self, entry_id: UUID) -> bool:
        """Reset a dead-lettered entry so the relay retries it.

        The retry budget starts over; last_error is kept for reference.

        Args:
            entry_id: The failed entry

        Returns:
            True if a failed entry was reset, False if none matched
        """
        stmt = (
            update(OutboxModel)
            .where(OutboxModel.id == entry_id)
            .where(OutboxModel.failed_at.is_not(None))
            .where(OutboxModel.processed_at.is_(None))
            .values(failed_at=None, retry_count=0)
        )
        result = await self._session.execute(stmt)
        return bool(result.rowcount)

    async def list_failed(self, limit: int = 100) -> list[OutboxEntry]:
        """List dead-lettered entries, most recent failure first."""
        stmt = (
            select(OutboxModel)
            .where(OutboxModel.failed_at.is_not(None))
            .order_by(OutboxModel.failed_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [model.to_value_object() for model in result.scalars().all()]

    async def purge_processed(self, older_than: datetime) -> int:
        """Delete processed entries older than a cutoff.

        Args:
            older_than: Entries processed before this instant are deleted

        Returns:
            Number of deleted entries
        """
        stmt = (
            delete(OutboxModel)
            .where(OutboxModel.processed_at.is_not(None))
            .where(OutboxModel.processed_at < older_than)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def stats(self) -> OutboxStats:
        """Count entries per status in a single query."""
        stmt = select(
            func.count().filter(_PENDING),
            func.count().filter(OutboxModel.failed_at.is_not(None)),
            func.count().filter(OutboxModel.processed_at.is_not(None)),
            func.min(OutboxModel.created_at).filter(_PENDING),
        ).select_from(OutboxModel)

        result = await self._session.execute(stmt)
        pending, failed, processed, oldest_pending_at = result.one()

        return OutboxStats(
            pending=pending or 0,
            failed=failed or 0,
            processed=processed or 0,
            oldest_pending_at=oldest_pending_at,
        )

    async def has_earlier_pending(self, entry: OutboxEntry) -> bool:
        """Check whether an older pending entry exists for the same aggregate.

        Rows locked by another relay still count as pending, so this also
        keeps replicas from overtaking each other on one aggregate.
        Dead-lettered entries do not block later ones.

        Args:
            entry: The entry about to be published

        Returns:
            True if the entry has to wait
        """
        stmt = select(
            select(OutboxModel.id)
            .where(OutboxModel.aggregate_type == entry.aggregate_type)
            .where(OutboxModel.aggregate_id == entry.aggregate_id)
            .where(_PENDING)
            .where(OutboxModel.created_at < entry.created_at)
            .exists()
        )
        result = await self._session.execute(stmt)
        return bool(result.scalar())
