"""Outbox relay: publishes outbox entries to the message broker.

The relay runs as a background task within the FastAPI application or as
a standalone process. It listens for PostgreSQL NOTIFY events and polls
the outbox table as a fallback.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.outbox.repository import OutboxRepository
from shared_kernel.outbox.observability import (
    DefaultOutboxRelayProbe,
    OutboxRelayProbe,
)
from shared_kernel.outbox.value_objects import OutboundMessage, OutboxEntry

if TYPE_CHECKING:
    from shared_kernel.outbox.ports import (
        IOutboxRepository,
        MessagePublisher,
        MessageTranslator,
        OutboxEventSource,
    )


class OutboxRelay:
    """Background relay that publishes outbox entries and marks them sent.

    The relay uses two strategies:
    1. Event source (LISTEN/NOTIFY): real-time processing of new entries
    2. Polling: every N seconds, to catch anything missed and to retry

    Delivery is at-least-once. An entry is marked processed only after the
    publisher accepted every message it produced; a crash in between means
    the entry is published again, with the same message_id header.

    Failed entries are retried on the next cycle and moved to the dead
    letter queue after max_retries attempts. Entries are published in
    creation order per aggregate: while an older entry of the same aggregate
    is pending, newer ones wait.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        publisher: MessagePublisher,
        translator: MessageTranslator,
        probe: OutboxRelayProbe | None = None,
        event_source: OutboxEventSource | None = None,
        poll_interval_seconds: float = 30,
        batch_size: int = 100,
        max_retries: int = 5,
        retention_hours: int = 0,
        repository_factory: Callable[[AsyncSession], IOutboxRepository] = OutboxRepository,
    ) -> None:
        """Initialize the relay.

        Args:
            session_factory: Factory for creating database sessions
            publisher: Broker publisher
            translator: Translator from outbox payloads to broker messages
            probe: Observability probe for logging/metrics
            event_source: Optional push source of new entry ids (NOTIFY)
            poll_interval_seconds: How often to poll for pending entries
            batch_size: Maximum entries to process per batch
            max_retries: Attempts before moving an entry to the DLQ
            retention_hours: Purge processed entries older than this; 0 keeps them
            repository_factory: Builds an outbox repository bound to a session
        """
        self._session_factory = session_factory
        self._publisher = publisher
        self._translator = translator
        self._probe = probe or DefaultOutboxRelayProbe()
        self._event_source = event_source
        self._poll_interval = poll_interval_seconds
        self._batch_size = batch_size
        self._max_retries = max_retries
        self._retention = timedelta(hours=retention_hours) if retention_hours else None
        self._repository_factory = repository_factory
        self._running = False
        self._tasks: list[asyncio.Task] = []

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the poll loop and, if configured, the listen loop."""
        if self._running:
            return

        self._running = True
        self._probe.relay_started()

        self._tasks.append(asyncio.create_task(self._poll_loop()))

        if self._event_source is not None:
            self._tasks.append(asyncio.create_task(self._listen_loop()))

    async def stop(self) -> None:
        """Gracefully stop the relay.

        Signals all loops to stop, waits for them, then releases the
        event source and the publisher.
        """
        self._running = False

        if self._event_source is not None:
            await self._event_source.stop()

        for task in self._tasks:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        self._tasks.clear()
        await self._publisher.close()
        self._probe.relay_stopped()

    async def run_once(self) -> int:
        """Fetch and process one batch of pending entries.

        Returns:
            Number of entries fetched (published, failed or deferred)
        """
        async with self._session_factory() as session:
            outbox = self._repository_factory(session)
            entries = await outbox.fetch_unprocessed(limit=self._batch_size)

            if entries:
                await self._process_entries(entries, outbox)
                await session.commit()
                self._probe.batch_processed(len(entries))

            return len(entries)

    async def process_entry_by_id(self, entry_id: UUID) -> None:
        """Process a single entry by id (event source callback).

        Errors are reported and swallowed: the poll loop picks the entry up.
        """
        if not self._running:
            return

        try:
            async with self._session_factory() as session:
                outbox = self._repository_factory(session)
                entry = await outbox.fetch_unprocessed_by_id(entry_id)

                if entry is not None:
                    await self._process_entries([entry], outbox)
                    await session.commit()
        except Exception as e:
            self._probe.listen_loop_error(str(e))

    async def purge_expired(self) -> int:
        """Delete processed entries older than the retention window.

        Returns:
            Number of deleted entries (0 when retention is disabled)
        """
        if self._retention is None:
            return 0

        cutoff = datetime.now(UTC) - self._retention
        async with self._session_factory() as session:
            outbox = self._repository_factory(session)
            deleted = await outbox.purge_processed(older_than=cutoff)
            await session.commit()

        self._probe.processed_entries_purged(deleted)
        return deleted

    async def _listen_loop(self) -> None:
        """Feed event source notifications into process_entry_by_id."""
        assert self._event_source is not None
        self._probe.listen_loop_started()

        try:
            await self._event_source.start(self.process_entry_by_id)
        except Exception as e:
            # Polling keeps running without notifications
            self._probe.listen_loop_error(str(e))

    async def _poll_loop(self) -> None:
        """Poll for pending entries until stopped.

        A full batch means more entries are probably waiting, so the next
        batch starts right away instead of sleeping.
        """
        self._probe.poll_loop_started()

        while self._running:
            fetched = 0
            try:
                fetched = await self.run_once()
                await self.purge_expired()
            except Exception as e:
                self._probe.poll_loop_error(str(e))

            if fetched >= self._batch_size:
                await asyncio.sleep(0)
            else:
                await asyncio.sleep(self._poll_interval)

    async def _process_entries(
        self,
        entries: list[OutboxEntry],
        outbox: IOutboxRepository,
    ) -> None:
        """Publish entries in order, keeping per-aggregate ordering."""
        blocked: set[tuple[str, str]] = set()
        checked: set[tuple[str, str]] = set()

        for entry in entries:
            aggregate = (entry.aggregate_type, entry.aggregate_id)

            if aggregate not in checked:
                checked.add(aggregate)
                if await outbox.has_earlier_pending(entry):
                    blocked.add(aggregate)

            if aggregate in blocked:
                self._probe.event_skipped_for_ordering(entry.id, entry.aggregate_id)
                continue

            try:
                message_count = await self._publish_entry(entry)
                await outbox.mark_processed(entry.id)
                self._probe.event_published(entry.id, entry.event_type, message_count)

            except Exception as e:
                blocked.add(aggregate)
                await self._handle_publish_failure(entry, str(e), outbox)

    async def _publish_entry(self, entry: OutboxEntry) -> int:
        """Translate an entry and publish every resulting message.

        Returns:
            Number of messages published
        """
        messages = self._translator.translate(entry.event_type, entry.payload)
        self._probe.event_translated(entry.id, entry.event_type, len(messages))

        for index, message in enumerate(messages):
            await self._publisher.publish(
                self._with_envelope(entry, message, index, len(messages))
            )

        return len(messages)

    @staticmethod
    def _with_envelope(
        entry: OutboxEntry,
        message: OutboundMessage,
        index: int,
        total: int,
    ) -> OutboundMessage:
        """Attach the envelope headers consumers use to deduplicate and trace."""
        message_id = str(entry.id) if total == 1 else f"{entry.id}:{index}"
        headers = {
            "message_id": message_id,
            "event_type": entry.event_type,
            "aggregate_type": entry.aggregate_type,
            "aggregate_id": entry.aggregate_id,
            "occurred_at": entry.occurred_at.isoformat(),
        }
        if entry.correlation_id:
            headers["correlation_id"] = entry.correlation_id

        return message.with_headers(**headers)

    async def _handle_publish_failure(
        self,
        entry: OutboxEntry,
        error: str,
        outbox: IOutboxRepository,
    ) -> None:
        """Record a failed attempt, moving the entry to the DLQ when exhausted."""
        new_retry_count = entry.retry_count + 1

        if new_retry_count >= self._max_retries:
            await outbox.move_to_dlq(entry.id, new_retry_count, error)
            self._probe.event_moved_to_dlq(entry.id, entry.event_type, error)
        else:
            await outbox.record_failure(entry.id, new_retry_count, error)
            self._probe.event_publish_failed(entry.id, error, new_retry_count)
