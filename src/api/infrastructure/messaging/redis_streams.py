"""Redis Streams publisher for the outbox relay.

Each OutboundMessage becomes one XADD entry on ``<prefix><stream>``. Redis
stream fields are flat strings, so the body and headers are JSON-encoded.
Streams are trimmed approximately with MAXLEN to bound memory.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from redis.asyncio import Redis
from redis.exceptions import RedisError

from shared_kernel.outbox.exceptions import PublishError
from shared_kernel.outbox.observability import DefaultPublisherProbe, PublisherProbe
from shared_kernel.outbox.value_objects import OutboundMessage

if TYPE_CHECKING:
    from infrastructure.settings import BrokerSettings


def encode_fields(message: OutboundMessage) -> dict[str, str]:
    """Flatten a message into Redis stream fields.

    Args:
        message: The message to encode

    Returns:
        Field map with string values only
    """
    return {
        "message_id": message.headers.get("message_id", ""),
        "event_type": message.headers.get("event_type", ""),
        "key": message.key,
        "body": json.dumps(message.body, separators=(",", ":"), default=str),
        "headers": json.dumps(message.headers, separators=(",", ":"), sort_keys=True),
    }


class RedisStreamPublisher:
    """MessagePublisher backed by Redis Streams.

    XADD returns once the entry is appended, which is the acknowledgement
    the relay waits for before marking an outbox entry sent.
    """

    def __init__(
        self,
        client: Redis,
        stream_prefix: str = "events:",
        max_len: int | None = 100_000,
        probe: PublisherProbe | None = None,
    ) -> None:
        """Initialize the publisher.

        Args:
            client: redis.asyncio client (decode_responses=True)
            stream_prefix: Prefix prepended to every stream name
            max_len: Approximate stream length cap; None or 0 disables trimming
            probe: Optional observability probe
        """
        self._client = client
        self._stream_prefix = stream_prefix
        self._max_len = max_len or None
        self._probe = probe or DefaultPublisherProbe(backend="redis")

    @classmethod
    def from_settings(cls, settings: BrokerSettings) -> RedisStreamPublisher:
        """Build a publisher from broker settings."""
        client = Redis.from_url(
            settings.redis_url.get_secret_value(),
            decode_responses=True,
        )
        return cls(
            client=client,
            stream_prefix=settings.stream_prefix,
            max_len=settings.stream_max_len,
        )

    def stream_name(self, stream: str) -> str:
        """Full Redis key for a logical stream."""
        return f"{self._stream_prefix}{stream}"

    async def publish(self, message: OutboundMessage) -> str:
        """Append a message to its stream.

        Returns:
            The Redis stream entry id (e.g. "1700000000000-0")

        Raises:
            PublishError: If Redis rejected the command or is unreachable
        """
        name = self.stream_name(message.stream)
        fields = encode_fields(message)

        try:
            if self._max_len:
                message_id = await self._client.xadd(
                    name, fields, maxlen=self._max_len, approximate=True
                )
            else:
                message_id = await self._client.xadd(name, fields)
        except RedisError as e:
            self._probe.message_publish_failed(name, str(e))
            raise PublishError(f"Failed to publish to {name}: {e}", stream=name) from e

        message_id = str(message_id)
        self._probe.message_published(name, message_id)
        return message_id

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()
        self._probe.publisher_closed()
