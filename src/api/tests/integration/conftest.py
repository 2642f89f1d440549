"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance with the migrations
applied (alembic upgrade head). Use docker-compose for testing.
"""

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from infrastructure.database.engines import build_async_url
from infrastructure.settings import DatabaseSettings


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        OUTPOST_DB_HOST, OUTPOST_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("OUTPOST_DB_HOST", "localhost"),
        port=int(os.getenv("OUTPOST_DB_PORT", "5432")),
        database=os.getenv("OUTPOST_DB_DATABASE", "outpost"),
        username=os.getenv("OUTPOST_DB_USERNAME", "outpost"),
        password=SecretStr(os.getenv("OUTPOST_DB_PASSWORD", "outpost_dev_password")),
    )


@pytest_asyncio.fixture
async def engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(build_async_url(integration_db_settings))
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(
    engine: AsyncEngine,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory over clean orders and outbox tables."""
    async with engine.begin() as connection:
        await connection.execute(text("TRUNCATE outbox, orders"))

    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    async with engine.begin() as connection:
        await connection.execute(text("TRUNCATE outbox, orders"))
