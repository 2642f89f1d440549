"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class DatabaseProbe(Protocol):
    """Domain probe for database engine lifecycle.

    Captures engine creation and disposal without exposing logging
    implementation details to the session dependencies.
    """

    def engine_created(self, role: str, connection_string: str) -> None:
        """Record that an async engine was created for a role (read/write)."""
        ...

    def engine_disposed(self, role: str) -> None:
        """Record that an async engine was disposed."""
        ...

    def connection_check_failed(self, role: str, error: str) -> None:
        """Record that a connectivity check against an engine failed."""
        ...


class DefaultDatabaseProbe:
    """Default implementation of DatabaseProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def engine_created(self, role: str, connection_string: str) -> None:
        """Record that an async engine was created for a role (read/write)."""
        self._logger.info(
            "database_engine_created",
            role=role,
            connection=connection_string,
        )

    def engine_disposed(self, role: str) -> None:
        """Record that an async engine was disposed."""
        self._logger.info("database_engine_disposed", role=role)

    def connection_check_failed(self, role: str, error: str) -> None:
        """Record that a connectivity check against an engine failed."""
        self._logger.error("database_connection_check_failed", role=role, error=error)
