"""Publisher selection from configuration."""

from __future__ import annotations

from infrastructure.messaging.in_memory import InMemoryPublisher
from infrastructure.messaging.redis_streams import RedisStreamPublisher
from infrastructure.settings import BrokerSettings
from shared_kernel.outbox.ports import MessagePublisher


def create_publisher(settings: BrokerSettings) -> MessagePublisher:
    """Build the publisher configured by OUTPOST_BROKER_BACKEND.

    Args:
        settings: Broker settings

    Returns:
        A MessagePublisher implementation
    """
    match settings.backend:
        case "redis":
            return RedisStreamPublisher.from_settings(settings)
        case "memory":
            return InMemoryPublisher()
        case _:
            raise ValueError(f"Unsupported broker backend: {settings.backend}")
