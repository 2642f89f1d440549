"""Observability probes for the outbox relay.

Following Domain Oriented Observability, probes capture domain-significant
events and metrics without cluttering relay logic with logging concerns.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

import structlog

logger = structlog.get_logger()


class OutboxRelayProbe(Protocol):
    """Protocol for outbox relay observability.

    Implementations can log, emit metrics, or send traces.
    """

    def relay_started(self) -> None:
        """Called when the relay starts."""
        ...

    def relay_stopped(self) -> None:
        """Called when the relay stops."""
        ...

    def event_published(
        self, entry_id: UUID, event_type: str, message_count: int
    ) -> None:
        """Called when every message of an entry was accepted and it was marked sent."""
        ...

    def event_publish_failed(
        self, entry_id: UUID, error: str, retry_count: int
    ) -> None:
        """Called when publishing fails and the entry will be retried."""
        ...

    def event_moved_to_dlq(self, entry_id: UUID, event_type: str, error: str) -> None:
        """Called when an entry exceeds max retries and is moved to DLQ."""
        ...

    def event_skipped_for_ordering(self, entry_id: UUID, aggregate_id: str) -> None:
        """Called when an entry waits because an earlier one of its aggregate failed."""
        ...

    def batch_processed(self, count: int) -> None:
        """Called when a batch of entries is processed."""
        ...

    def listen_loop_started(self) -> None:
        """Called when the LISTEN loop starts."""
        ...

    def listen_loop_error(self, error: str) -> None:
        """Called when the LISTEN loop fails; polling continues."""
        ...

    def poll_loop_started(self) -> None:
        """Called when the poll loop starts."""
        ...

    def poll_loop_error(self, error: str) -> None:
        """Called when an error occurs in the poll loop."""
        ...

    def event_translated(
        self, entry_id: UUID, event_type: str, message_count: int
    ) -> None:
        """Called when an entry is translated to broker messages."""
        ...

    def processed_entries_purged(self, count: int) -> None:
        """Called when retention removed processed entries."""
        ...

    def translator_registered(
        self, context_name: str, event_types: frozenset[str]
    ) -> None:
        """Called when a translator plugin is registered."""
        ...


class DefaultOutboxRelayProbe:
    """Default implementation using structlog.

    Logs all relay events with appropriate log levels.
    """

    def __init__(self) -> None:
        """Initialize the probe with a logger."""
        self._log = logger.bind(component="outbox_relay")

    def relay_started(self) -> None:
        """Log relay start."""
        self._log.info("outbox_relay_started")

    def relay_stopped(self) -> None:
        """Log relay stop."""
        self._log.info("outbox_relay_stopped")

    def event_published(
        self, entry_id: UUID, event_type: str, message_count: int
    ) -> None:
        """Log successful publication."""
        self._log.info(
            "outbox_event_published",
            entry_id=str(entry_id),
            event_type=event_type,
            message_count=message_count,
        )

    def event_publish_failed(
        self, entry_id: UUID, error: str, retry_count: int
    ) -> None:
        """Log failed publication that will be retried."""
        self._log.warning(
            "outbox_event_publish_failed",
            entry_id=str(entry_id),
            error=error,
            retry_count=retry_count,
        )

    def event_moved_to_dlq(self, entry_id: UUID, event_type: str, error: str) -> None:
        """Log event moved to dead letter queue."""
        self._log.error(
            "outbox_event_moved_to_dlq",
            entry_id=str(entry_id),
            event_type=event_type,
            error=error,
        )

    def event_skipped_for_ordering(self, entry_id: UUID, aggregate_id: str) -> None:
        self._log.debug(
            "outbox_event_skipped_for_ordering",
            entry_id=str(entry_id),
            aggregate_id=aggregate_id,
        )

    def batch_processed(self, count: int) -> None:
        """Log batch processing."""
        if count > 0:
            self._log.info("outbox_batch_processed", count=count)

    def listen_loop_started(self) -> None:
        self._log.info("outbox_listen_loop_started")

    def listen_loop_error(self, error: str) -> None:
        self._log.warning("outbox_listen_loop_error", error=error)

    def poll_loop_started(self) -> None:
        self._log.info("outbox_poll_loop_started")

    def poll_loop_error(self, error: str) -> None:
        self._log.warning("outbox_poll_loop_error", error=error)

    def event_translated(
        self, entry_id: UUID, event_type: str, message_count: int
    ) -> None:
        """Log translation with message count.

        Zero messages is valid for internal events that have no public
        counterpart on the broker.
        """
        self._log.debug(
            "outbox_event_translated",
            entry_id=str(entry_id),
            event_type=event_type,
            message_count=message_count,
        )

    def processed_entries_purged(self, count: int) -> None:
        if count > 0:
            self._log.info("outbox_processed_entries_purged", count=count)

    def translator_registered(
        self, context_name: str, event_types: frozenset[str]
    ) -> None:
        """Log translator plugin registration."""
        self._log.info(
            "outbox_translator_registered",
            context=context_name,
            event_types=sorted(event_types),
            event_count=len(event_types),
        )


class EventSourceProbe(Protocol):
    """Protocol for event source observability."""

    def event_source_started(self, channel: str) -> None:
        """Called when the event source starts listening."""
        ...

    def event_source_stopped(self) -> None:
        """Called when the event source stops."""
        ...

    def notification_received(self, entry_id: UUID) -> None:
        """Called when a valid notification is received."""
        ...

    def invalid_notification_ignored(self, payload: str, reason: str) -> None:
        """Called when an invalid notification is ignored."""
        ...

    def listener_error(self, error: str) -> None:
        """Called when an error occurs in the listener."""
        ...


class DefaultEventSourceProbe:
    """Default implementation using structlog."""

    def __init__(self) -> None:
        """Initialize the probe with a logger."""
        self._log = logger.bind(component="event_source")

    def event_source_started(self, channel: str) -> None:
        self._log.info("event_source_started", channel=channel)

    def event_source_stopped(self) -> None:
        self._log.info("event_source_stopped")

    def notification_received(self, entry_id: UUID) -> None:
        self._log.debug("notification_received", entry_id=str(entry_id))

    def invalid_notification_ignored(self, payload: str, reason: str) -> None:
        self._log.warning(
            "invalid_notification_ignored",
            payload=payload,
            reason=reason,
        )

    def listener_error(self, error: str) -> None:
        self._log.error("event_source_listener_error", error=error)


class PublisherProbe(Protocol):
    """Protocol for broker publisher observability."""

    def message_published(self, stream: str, message_id: str) -> None:
        """Called when the broker accepted a message."""
        ...

    def message_publish_failed(self, stream: str, error: str) -> None:
        """Called when the broker rejected a message."""
        ...

    def publisher_closed(self) -> None:
        """Called when broker connections were released."""
        ...


class DefaultPublisherProbe:
    """Default implementation using structlog."""

    def __init__(self, backend: str = "redis") -> None:
        self._log = logger.bind(component="publisher", backend=backend)

    def message_published(self, stream: str, message_id: str) -> None:
        self._log.debug("message_published", stream=stream, message_id=message_id)

    def message_publish_failed(self, stream: str, error: str) -> None:
        self._log.warning("message_publish_failed", stream=stream, error=error)

    def publisher_closed(self) -> None:
        self._log.info("publisher_closed")
