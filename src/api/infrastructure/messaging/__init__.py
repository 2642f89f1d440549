"""Message broker publishers used by the outbox relay."""

from infrastructure.messaging.factory import create_publisher
from infrastructure.messaging.in_memory import InMemoryPublisher, PublishedMessage
from infrastructure.messaging.redis_streams import RedisStreamPublisher

__all__ = [
    "InMemoryPublisher",
    "PublishedMessage",
    "RedisStreamPublisher",
    "create_publisher",
]
