"""Value objects for the outbox pattern.

Value objects are immutable descriptors that provide type safety and
domain semantics for outbox entries and the broker messages produced
from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID


class OutboxStatus(StrEnum):
    """Derived lifecycle state of an outbox entry."""

    PENDING = "pending"
    PROCESSED = "processed"
    FAILED = "failed"


@dataclass(frozen=True)
class OutboxEntry:
    """Represents a single entry in the outbox table.

    This is an immutable value object that captures the state of an outbox
    entry as it exists in the database. It contains all the information
    needed to publish the entry to the message broker.

    Attributes:
        id: Unique identifier for the entry (UUID)
        aggregate_type: Type of aggregate that generated the event (e.g., "order")
        aggregate_id: ULID of the aggregate
        event_type: Name of the domain event type (e.g., "OrderPlaced")
        payload: Serialized event data as a dictionary
        occurred_at: When the domain event occurred
        processed_at: When the entry was published (None if unsent)
        created_at: When the entry was created in the outbox
        retry_count: Number of failed publish attempts
        last_error: The most recent error message (if any)
        failed_at: When the entry was moved to DLQ (None if not failed)
        correlation_id: Correlation id of the request that wrote the entry
    """

    id: UUID
    aggregate_type: str
    aggregate_id: str
    event_type: str
    payload: dict[str, Any]
    occurred_at: datetime
    processed_at: datetime | None
    created_at: datetime
    retry_count: int = 0
    last_error: str | None = None
    failed_at: datetime | None = None
    correlation_id: str | None = None

    @property
    def is_processed(self) -> bool:
        """Check if this entry has been published."""
        return self.processed_at is not None

    @property
    def is_failed(self) -> bool:
        """Check if this entry has been moved to the DLQ."""
        return self.failed_at is not None

    @property
    def status(self) -> OutboxStatus:
        """Derive the lifecycle status from the marker columns."""
        if self.processed_at is not None:
            return OutboxStatus.PROCESSED
        if self.failed_at is not None:
            return OutboxStatus.FAILED
        return OutboxStatus.PENDING


@dataclass(frozen=True)
class OutboundMessage:
    """A message ready to hand to the broker.

    Produced by MessageTranslators from an outbox entry payload and
    enriched with envelope headers by the relay before publishing.

    Attributes:
        stream: Logical destination (stream/topic name without prefix)
        key: Partitioning/ordering key, usually the aggregate id
        body: JSON-compatible message body
        headers: String headers carried next to the body
    """

    stream: str
    key: str
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)

    def with_headers(self, **headers: str) -> OutboundMessage:
        """Return a copy with additional headers merged in.

        Existing header values are overwritten by the new ones.
        """
        return OutboundMessage(
            stream=self.stream,
            key=self.key,
            body=self.body,
            headers={**self.headers, **headers},
        )


@dataclass(frozen=True)
class OutboxStats:
    """Point-in-time counts used by health and monitoring endpoints."""

    pending: int
    failed: int
    processed: int
    oldest_pending_at: datetime | None = None
