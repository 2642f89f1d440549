"""In-memory publisher.

Non-durable: messages live in a list and are lost on restart. Used for
local development without a broker and as a test double for the relay.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from shared_kernel.outbox.exceptions import PublishError
from shared_kernel.outbox.observability import DefaultPublisherProbe, PublisherProbe
from shared_kernel.outbox.value_objects import OutboundMessage


@dataclass(frozen=True)
class PublishedMessage:
    """A message accepted by the in-memory publisher."""

    broker_id: str
    message: OutboundMessage


class InMemoryPublisher:
    """MessagePublisher that keeps messages in process memory."""

    def __init__(self, probe: PublisherProbe | None = None) -> None:
        self._messages: list[PublishedMessage] = []
        self._failures: dict[str, str] = {}
        self._lock = asyncio.Lock()
        self._closed = False
        self._probe = probe or DefaultPublisherProbe(backend="memory")

    @property
    def messages(self) -> list[PublishedMessage]:
        """Messages accepted so far, in publish order."""
        return list(self._messages)

    def messages_for(self, stream: str) -> list[OutboundMessage]:
        """Messages accepted for one stream."""
        return [m.message for m in self._messages if m.message.stream == stream]

    def fail_stream(self, stream: str, error: str = "broker unavailable") -> None:
        """Make every publish to a stream fail until cleared."""
        self._failures[stream] = error

    def clear_failures(self) -> None:
        self._failures.clear()

    async def publish(self, message: OutboundMessage) -> str:
        """Store a message and return its sequence-based id.

        Raises:
            PublishError: If the stream was configured to fail or the
                publisher was closed
        """
        if self._closed:
            raise PublishError("Publisher is closed", stream=message.stream)

        error = self._failures.get(message.stream)
        if error is not None:
            self._probe.message_publish_failed(message.stream, error)
            raise PublishError(error, stream=message.stream)

        async with self._lock:
            broker_id = f"{len(self._messages) + 1}-0"
            self._messages.append(PublishedMessage(broker_id=broker_id, message=message))

        self._probe.message_published(message.stream, broker_id)
        return broker_id

    async def close(self) -> None:
        self._closed = True
        self._probe.publisher_closed()
