"""Protocols (ports) for the outbox pattern.

These protocols define the interfaces for outbox operations. They enable
a plugin architecture where each bounded context can register its own
event serializers and message translators without shared_kernel knowing
about them, and where the broker behind the relay can be swapped.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable
from uuid import UUID

if TYPE_CHECKING:
    from shared_kernel.outbox.value_objects import (
        OutboundMessage,
        OutboxEntry,
        OutboxStats,
    )


@runtime_checkable
class IOutboxRepository(Protocol):
    """Repository for outbox entry persistence.

    The repository shares the same database session as the calling service,
    ensuring that event appends happen within the same transaction as the
    aggregate changes. It never commits.
    """

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

        This method should be called after the aggregate is persisted but
        before the transaction is committed.

        Args:
            event_type: Name of the domain event type (e.g., "OrderPlaced")
            payload: Pre-serialized event data as a dictionary
            occurred_at: When the domain event occurred
            aggregate_type: Type of aggregate (e.g., "order")
            aggregate_id: ULID of the aggregate
            correlation_id: Correlation id of the originating request
        """
        ...

    async def fetch_unprocessed(self, limit: int = 100) -> list["OutboxEntry"]:
        """Fetch pending entries ordered by creation time.

        Uses FOR UPDATE SKIP LOCKED for safe concurrent access when multiple
        relays are running.

        Args:
            limit: Maximum number of entries to fetch

        Returns:
            List of pending OutboxEntry objects
        """
        ...

    async def fetch_unprocessed_by_id(self, entry_id: UUID) -> "OutboxEntry | None":
        """Fetch and lock a single pending entry.

        Args:
            entry_id: The UUID of the entry

        Returns:
            The entry, or None if it is missing, already handled or locked
        """
        ...

    async def has_earlier_pending(self, entry: "OutboxEntry") -> bool:
        """Check whether an older pending entry exists for the same aggregate."""
        ...

    async def mark_processed(self, entry_id: UUID) -> None:
        """Mark an entry as processed (sent)."""
        ...

    async def record_failure(
        self, entry_id: UUID, retry_count: int, error: str
    ) -> None:
        """Store a failed publish attempt; the entry stays pending."""
        ...

    async def move_to_dlq(self, entry_id: UUID, retry_count: int, error: str) -> None:
        """Mark an entry as permanently failed."""
        ...

    async def requeue(self, entry_id: UUID) -> bool:
        """Reset a dead-lettered entry so the relay picks it up again.

        Returns:
            True if a failed entry was reset, False otherwise
        """
        ...

    async def list_failed(self, limit: int = 100) -> list["OutboxEntry"]:
        """List dead-lettered entries, most recent failure first."""
        ...

    async def purge_processed(self, older_than: datetime) -> int:
        """Delete processed entries older than a cutoff.

        Returns:
            Number of deleted entries
        """
        ...

    async def stats(self) -> "OutboxStats":
        """Count entries per status."""
        ...


@runtime_checkable
class EventSerializer(Protocol):
    """Serializes domain events into outbox payloads.

    Each bounded context provides its own implementation that knows how to
    serialize its domain events to JSON-compatible dictionaries.
    """

    def supported_event_types(self) -> frozenset[str]:
        """Return the event type names this serializer handles."""
        ...

    def serialize(self, event: Any) -> dict[str, Any]:
        """Convert a domain event to a JSON-serializable dictionary.

        Raises:
            ValueError: If the event type is not supported
        """
        ...


@runtime_checkable
class MessageTranslator(Protocol):
    """Translates outbox payloads to broker messages.

    Each bounded context decides which stream its events go to and what the
    public message body looks like, keeping internal event fields private.
    """

    def supported_event_types(self) -> frozenset[str]:
        """Return the event type names this translator handles."""
        ...

    def translate(
        self,
        event_type: str,
        payload: dict[str, Any],
    ) -> list["OutboundMessage"]:
        """Convert an event payload to broker messages.

        An empty list is valid for events that have no public counterpart.

        Raises:
            ValueError: If the event type is not supported
        """
        ...


@runtime_checkable
class MessagePublisher(Protocol):
    """Publishes messages to a broker.

    publish() must only return once the broker has accepted the message;
    the relay marks entries sent based on that.
    """

    async def publish(self, message: "OutboundMessage") -> str:
        """Publish a message.

        Returns:
            Broker-assigned message id

        Raises:
            PublishError: If the broker rejected or did not acknowledge the message
        """
        ...

    async def close(self) -> None:
        """Release broker connections."""
        ...


@runtime_checkable
class OutboxEventSource(Protocol):
    """Event source for outbox entries.

    Implementations provide different mechanisms for being notified of new
    outbox entries (PostgreSQL NOTIFY, message queue, etc.). The event source
    operates in a push model: when started, it invokes the callback with the
    UUID of each new entry.
    """

    async def start(self, on_event: Callable[[UUID], Awaitable[None]]) -> None:
        """Start the event source and begin monitoring for events.

        This method should not return until stop() is called or an error occurs.

        Args:
            on_event: Async callback to invoke when an event occurs, passing entry UUID
        """
        ...

    async def stop(self) -> None:
        """Stop the event source and clean up resources."""
        ...
