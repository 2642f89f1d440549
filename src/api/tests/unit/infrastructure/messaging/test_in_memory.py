"""Unit tests for InMemoryPublisher."""

import pytest

from infrastructure.messaging.in_memory import InMemoryPublisher
from shared_kernel.outbox.exceptions import PublishError
from shared_kernel.outbox.value_objects import OutboundMessage


def message(stream: str = "orders", key: str = "k") -> OutboundMessage:
    return OutboundMessage(stream=stream, key=key, body={"n": 1})


class TestInMemoryPublisher:
    """Tests for the non-durable publisher."""

    @pytest.mark.asyncio
    async def test_keeps_messages_in_publish_order(self):
        publisher = InMemoryPublisher()

        first = await publisher.publish(message(key="a"))
        second = await publisher.publish(message(key="b"))

        assert (first, second) == ("1-0", "2-0")
        assert [m.message.key for m in publisher.messages] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_messages_for_filters_by_stream(self):
        publisher = InMemoryPublisher()
        await publisher.publish(message(stream="orders"))
        await publisher.publish(message(stream="billing"))

        assert [m.stream for m in publisher.messages_for("billing")] == ["billing"]

    @pytest.mark.asyncio
    async def test_failing_stream_raises_until_cleared(self):
        publisher = InMemoryPublisher()
        publisher.fail_stream("orders", "broker down")

        with pytest.raises(PublishError, match="broker down"):
            await publisher.publish(message())

        publisher.clear_failures()
        await publisher.publish(message())
        assert len(publisher.messages) == 1

    @pytest.mark.asyncio
    async def test_closed_publisher_rejects_messages(self):
        publisher = InMemoryPublisher()
        await publisher.close()

        with pytest.raises(PublishError):
            await publisher.publish(message())
