"""Unit test fixtures with mocked dependencies."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from shared_kernel.outbox.value_objects import OutboxEntry

ORDER_ID = "01ARZ3NDEKTSV4RRFFQ69G5FAV"
OTHER_ORDER_ID = "01BX5ZZKBKACTAV9WEVGEMMVRZ"


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
    )


@pytest.fixture
def make_entry():
    """Build OutboxEntry objects with sensible defaults.

    Each call gets a created_at one second after the previous one, so
    entries built in sequence have a stable creation order.
    """
    base = datetime(2026, 1, 8, 12, 0, 0, tzinfo=UTC)
    counter = iter(range(1_000_000))

    def _make(**overrides) -> OutboxEntry:
        created_at = base + timedelta(seconds=next(counter))
        fields = {
            "id": uuid4(),
            "aggregate_type": "order",
            "aggregate_id": ORDER_ID,
            "event_type": "OrderPlaced",
            "payload": {"order_id": ORDER_ID},
            "occurred_at": created_at,
            "processed_at": None,
            "created_at": created_at,
        }
        fields.update(overrides)
        return OutboxEntry(**fields)

    return _make


@pytest.fixture
def mock_outbox():
    """Outbox repository double with every method stubbed."""
    outbox = MagicMock()
    outbox.fetch_unprocessed = AsyncMock(return_value=[])
    outbox.fetch_unprocessed_by_id = AsyncMock(return_value=None)
    outbox.has_earlier_pending = AsyncMock(return_value=False)
    outbox.mark_processed = AsyncMock()
    outbox.record_failure = AsyncMock()
    outbox.move_to_dlq = AsyncMock()
    outbox.purge_processed = AsyncMock(return_value=0)
    return outbox


@pytest.fixture
def mock_session():
    return AsyncMock()


@pytest.fixture
def mock_session_factory(mock_session):
    """async_sessionmaker double yielding mock_session."""
    factory = MagicMock()
    factory.return_value.__aenter__.return_value = mock_session
    factory.return_value.__aexit__.return_value = False
    return factory
