"""Unit tests for infrastructure settings."""

import pytest
from pydantic import ValidationError

from infrastructure.settings import BrokerSettings, DatabaseSettings, OutboxSettings


class TestDatabaseSettingsPoolConfiguration:
    """Tests for connection pool configuration."""

    def test_default_pool_settings(self):
        settings = DatabaseSettings()
        assert settings.pool_min_connections >= 1
        assert settings.pool_max_connections >= settings.pool_min_connections

    def test_pool_max_must_be_greater_than_or_equal_to_min(self):
        with pytest.raises(ValidationError) as exc_info:
            DatabaseSettings(pool_min_connections=10, pool_max_connections=5)

        assert "pool_max_connections" in str(exc_info.value)

    def test_pool_max_equal_to_min_is_valid(self):
        settings = DatabaseSettings(pool_min_connections=5, pool_max_connections=5)
        assert settings.pool_max_connections == 5

    def test_pool_min_must_be_positive(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_min_connections=0)

    def test_pool_max_respects_upper_limit(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_max_connections=101)


class TestDatabaseSettingsEnvironment:
    """Tests for loading from OUTPOST_DB_* variables."""

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("OUTPOST_DB_HOST", "db.internal")
        monkeypatch.setenv("OUTPOST_DB_PORT", "6543")
        monkeypatch.setenv("OUTPOST_DB_PASSWORD", "s3cret")

        settings = DatabaseSettings()

        assert settings.host == "db.internal"
        assert settings.port == 6543
        assert settings.password.get_secret_value() == "s3cret"

    def test_connection_string_hides_password(self, mock_db_settings):
        assert "testpass" not in mock_db_settings.connection_string
        assert mock_db_settings.connection_string == (
            "postgresql://testuser@testhost:5432/testdb"
        )


class TestOutboxSettings:
    """Tests for relay configuration."""

    def test_defaults(self):
        settings = OutboxSettings()

        assert settings.relay_enabled is True
        assert settings.listen_enabled is True
        assert settings.notify_channel == "outbox_events"
        assert settings.poll_interval_seconds == 30
        assert settings.batch_size == 100
        assert settings.max_retries == 5
        assert settings.retention_hours == 0

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("OUTPOST_OUTBOX_RELAY_ENABLED", "false")
        monkeypatch.setenv("OUTPOST_OUTBOX_BATCH_SIZE", "25")

        settings = OutboxSettings()

        assert settings.relay_enabled is False
        assert settings.batch_size == 25

    def test_batch_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            OutboxSettings(batch_size=0)


class TestBrokerSettings:
    """Tests for broker configuration."""

    def test_defaults_to_redis(self):
        settings = BrokerSettings()

        assert settings.backend == "redis"
        assert settings.stream_prefix == "events:"

    def test_rejects_unknown_backend(self):
        with pytest.raises(ValidationError):
            BrokerSettings(backend="kafka")

    def test_redis_url_is_secret(self):
        settings = BrokerSettings(redis_url="redis://:hunter2@cache:6379/0")

        assert "hunter2" not in repr(settings)
