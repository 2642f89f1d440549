"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        OUTPOST_DB_HOST: Database host (default: localhost)
        OUTPOST_DB_PORT: Database port (default: 5432)
        OUTPOST_DB_DATABASE: Database name (default: outpost)
        OUTPOST_DB_USERNAME: Database user (default: outpost)
        OUTPOST_DB_PASSWORD: Database password (required in production)
        OUTPOST_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        OUTPOST_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="OUTPOST_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="outpost", description="Database name")
    username: str = Field(default="outpost", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class OutboxSettings(BaseSettings):
    """Outbox relay settings.

    Environment variables:
        OUTPOST_OUTBOX_RELAY_ENABLED: Run the relay inside the API process (default: true)
        OUTPOST_OUTBOX_LISTEN_ENABLED: Use LISTEN/NOTIFY next to polling (default: true)
        OUTPOST_OUTBOX_NOTIFY_CHANNEL: NOTIFY channel name (default: outbox_events)
        OUTPOST_OUTBOX_POLL_INTERVAL_SECONDS: Seconds between polls (default: 30)
        OUTPOST_OUTBOX_BATCH_SIZE: Entries fetched per batch (default: 100)
        OUTPOST_OUTBOX_MAX_RETRIES: Attempts before dead-lettering (default: 5)
        OUTPOST_OUTBOX_RETENTION_HOURS: Keep processed entries this long, 0 keeps forever (default: 0)
    """

    model_config = SettingsConfigDict(
        env_prefix="OUTPOST_OUTBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    relay_enabled: bool = Field(default=True, description="Run the relay in-process")
    listen_enabled: bool = Field(
        default=True, description="Use PostgreSQL LISTEN/NOTIFY for low latency"
    )
    notify_channel: str = Field(
        default="outbox_events", description="NOTIFY channel name", min_length=1
    )
    poll_interval_seconds: float = Field(
        default=30.0, description="Seconds between polls", gt=0
    )
    batch_size: int = Field(
        default=100, description="Entries per batch", ge=1, le=10_000
    )
    max_retries: int = Field(
        default=5, description="Attempts before moving to DLQ", ge=1
    )
    retention_hours: int = Field(
        default=0, description="Processed entry retention, 0 disables purge", ge=0
    )


class BrokerSettings(BaseSettings):
    """Message broker settings.

    Environment variables:
        OUTPOST_BROKER_BACKEND: "redis" or "memory" (default: redis)
        OUTPOST_BROKER_REDIS_URL: Redis connection URL (default: redis://localhost:6379/0)
        OUTPOST_BROKER_STREAM_PREFIX: Prefix for stream names (default: "events:")
        OUTPOST_BROKER_STREAM_MAX_LEN: Approximate stream length cap, 0 disables (default: 100000)
    """

    model_config = SettingsConfigDict(
        env_prefix="OUTPOST_BROKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    backend: Literal["redis", "memory"] = Field(
        default="redis", description="Publisher backend"
    )
    redis_url: SecretStr = Field(
        default=SecretStr("redis://localhost:6379/0"),
        description="Redis connection URL",
    )
    stream_prefix: str = Field(default="events:", description="Stream name prefix")
    stream_max_len: int = Field(
        default=100_000, description="Approximate MAXLEN for XADD", ge=0
    )


class Settings(BaseSettings):
    """Application-wide settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Outpost API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_outbox_settings() -> OutboxSettings:
    """Get cached outbox relay settings."""
    return OutboxSettings()


@lru_cache
def get_broker_settings() -> BrokerSettings:
    """Get cached broker settings."""
    return BrokerSettings()
