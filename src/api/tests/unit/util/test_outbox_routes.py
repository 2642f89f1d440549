"""Unit tests for the outbox dead letter queue routes."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from infrastructure.database.dependencies import get_write_session
from infrastructure.outbox.dependencies import get_outbox_reader, get_outbox_repository
from util import outbox_routes


@pytest.fixture
def mock_outbox() -> MagicMock:
    outbox = MagicMock()
    outbox.list_failed = AsyncMock(return_value=[])
    outbox.requeue = AsyncMock(return_value=True)
    return outbox


@pytest.fixture
def mock_session() -> MagicMock:
    session = MagicMock()
    transaction = MagicMock()
    transaction.__aenter__ = AsyncMock(return_value=None)
    transaction.__aexit__ = AsyncMock(return_value=None)
    session.begin = MagicMock(return_value=transaction)
    return session


@pytest.fixture
def test_client(mock_outbox, mock_session) -> TestClient:
    app = FastAPI()
    app.dependency_overrides[get_outbox_reader] = lambda: mock_outbox
    app.dependency_overrides[get_outbox_repository] = lambda: mock_outbox
    app.dependency_overrides[get_write_session] = lambda: mock_session
    app.include_router(outbox_routes.router)
    return TestClient(app)


class TestListFailedEntries:
    """Tests for GET /outbox/failed."""

    def test_lists_dead_lettered_entries(self, test_client, mock_outbox, make_entry):
        failed_at = datetime(2026, 1, 8, 13, 0, 0, tzinfo=UTC)
        entry = make_entry(
            retry_count=5,
            last_error="broker down",
            failed_at=failed_at,
            correlation_id="req-1",
        )
        mock_outbox.list_failed.return_value = [entry]

        response = test_client.get("/outbox/failed", params={"limit": 10})

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert len(body) == 1
        assert body[0]["id"] == str(entry.id)
        assert body[0]["retry_count"] == 5
        assert body[0]["last_error"] == "broker down"
        assert body[0]["correlation_id"] == "req-1"
        mock_outbox.list_failed.assert_awaited_once_with(limit=10)

    def test_limit_is_bounded(self, test_client):
        response = test_client.get("/outbox/failed", params={"limit": 0})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_repository_error_returns_500(self, test_client, mock_outbox):
        mock_outbox.list_failed.side_effect = RuntimeError("db down")

        response = test_client.get("/outbox/failed")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR


class TestRequeueEntry:
    """Tests for POST /outbox/{entry_id}/requeue."""

    def test_requeues_in_transaction(self, test_client, mock_outbox, mock_session):
        entry_id = uuid4()

        response = test_client.post(f"/outbox/{entry_id}/requeue")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"id": str(entry_id), "requeued": True}
        mock_outbox.requeue.assert_awaited_once_with(entry_id)
        mock_session.begin.assert_called_once()

    def test_unknown_entry_returns_404(self, test_client, mock_outbox):
        mock_outbox.requeue.return_value = False

        response = test_client.post(f"/outbox/{uuid4()}/requeue")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_invalid_id_returns_422(self, test_client):
        response = test_client.post("/outbox/not-a-uuid/requeue")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_database_error_returns_500(self, test_client, mock_outbox):
        mock_outbox.requeue.side_effect = RuntimeError("db down")

        response = test_client.post(f"/outbox/{uuid4()}/requeue")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
