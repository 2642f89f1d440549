"""Outbox pattern building blocks shared by all bounded contexts.

The transactional outbox couples a domain state change with a durable
record of the message to publish, so commit success never depends on
broker availability.
"""

from shared_kernel.outbox.exceptions import PublishError
from shared_kernel.outbox.ports import (
    EventSerializer,
    IOutboxRepository,
    MessagePublisher,
    MessageTranslator,
    OutboxEventSource,
)
from shared_kernel.outbox.value_objects import (
    OutboundMessage,
    OutboxEntry,
    OutboxStats,
    OutboxStatus,
)

__all__ = [
    "EventSerializer",
    "IOutboxRepository",
    "MessagePublisher",
    "MessageTranslator",
    "OutboundMessage",
    "OutboxEntry",
    "OutboxEventSource",
    "OutboxStats",
    "OutboxStatus",
    "PublishError",
]
