"""Unit tests for outbox observability probes.

The bound structlog logger is replaced with a mock so the tests check
event names and levels without depending on logging configuration.
"""

from unittest.mock import MagicMock
from uuid import uuid4

from shared_kernel.outbox.observability import (
    DefaultEventSourceProbe,
    DefaultOutboxRelayProbe,
    DefaultPublisherProbe,
)


def with_mock_log(probe):
    probe._log = MagicMock()
    return probe


class TestDefaultOutboxRelayProbe:
    """Tests for the relay probe."""

    def test_accepts_every_protocol_call(self):
        probe = DefaultOutboxRelayProbe()
        entry_id = uuid4()

        probe.relay_started()
        probe.event_translated(entry_id, "OrderPlaced", 1)
        probe.event_published(entry_id, "OrderPlaced", 1)
        probe.event_publish_failed(entry_id, "timeout", 2)
        probe.event_moved_to_dlq(entry_id, "OrderPlaced", "timeout")
        probe.event_skipped_for_ordering(entry_id, "01ARZ3NDEKTSV4RRFFQ69G5FAV")
        probe.batch_processed(3)
        probe.listen_loop_started()
        probe.listen_loop_error("connection lost")
        probe.poll_loop_started()
        probe.poll_loop_error("connection lost")
        probe.processed_entries_purged(4)
        probe.translator_registered("orders", frozenset({"OrderPlaced"}))
        probe.relay_stopped()

    def test_dlq_is_logged_as_error(self):
        probe = with_mock_log(DefaultOutboxRelayProbe())
        entry_id = uuid4()

        probe.event_moved_to_dlq(entry_id, "OrderPlaced", "timeout")

        probe._log.error.assert_called_once_with(
            "outbox_event_moved_to_dlq",
            entry_id=str(entry_id),
            event_type="OrderPlaced",
            error="timeout",
        )

    def test_retryable_failure_is_logged_as_warning(self):
        probe = with_mock_log(DefaultOutboxRelayProbe())

        probe.event_publish_failed(uuid4(), "timeout", 2)

        probe._log.warning.assert_called_once()

    def test_empty_batch_is_not_logged(self):
        probe = with_mock_log(DefaultOutboxRelayProbe())

        probe.batch_processed(0)

        probe._log.info.assert_not_called()

    def test_translator_registration_lists_sorted_types(self):
        probe = with_mock_log(DefaultOutboxRelayProbe())

        probe.translator_registered(
            "orders", frozenset({"OrderPlaced", "OrderCancelled"})
        )

        probe._log.info.assert_called_once_with(
            "outbox_translator_registered",
            context="orders",
            event_types=["OrderCancelled", "OrderPlaced"],
            event_count=2,
        )


class TestDefaultEventSourceProbe:
    def test_invalid_notification_is_logged_as_warning(self):
        probe = with_mock_log(DefaultEventSourceProbe())

        probe.invalid_notification_ignored("garbage", "Invalid UUID format")

        probe._log.warning.assert_called_once_with(
            "invalid_notification_ignored",
            payload="garbage",
            reason="Invalid UUID format",
        )


class TestDefaultPublisherProbe:
    def test_publish_failure_is_logged_as_warning(self):
        probe = with_mock_log(DefaultPublisherProbe(backend="memory"))

        probe.message_publish_failed("events:orders", "down")

        probe._log.warning.assert_called_once_with(
            "message_publish_failed", stream="events:orders", error="down"
        )
