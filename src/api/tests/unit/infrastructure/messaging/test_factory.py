"""Unit tests for publisher selection."""

from infrastructure.messaging import (
    InMemoryPublisher,
    RedisStreamPublisher,
    create_publisher,
)
from infrastructure.settings import BrokerSettings


def test_memory_backend():
    publisher = create_publisher(BrokerSettings(backend="memory"))

    assert isinstance(publisher, InMemoryPublisher)


def test_redis_backend_uses_prefix():
    publisher = create_publisher(
        BrokerSettings(
            backend="redis",
            redis_url="redis://localhost:6379/1",
            stream_prefix="shop:",
        )
    )

    assert isinstance(publisher, RedisStreamPublisher)
    assert publisher.stream_name("orders") == "shop:orders"
