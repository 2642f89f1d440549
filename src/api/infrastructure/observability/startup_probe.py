"""Domain probe for application startup and lifecycle events.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events during application initialization and shutdown.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class StartupProbe(Protocol):
    """Domain probe for application startup operations."""

    def application_starting(self, app_name: str, version: str) -> None:
        """Record that the application lifespan has begun."""
        ...

    def relay_started_in_process(self, broker_backend: str) -> None:
        """Record that the outbox relay was started inside the API process."""
        ...

    def relay_disabled(self) -> None:
        """Record that the in-process relay is disabled by configuration."""
        ...

    def application_stopped(self) -> None:
        """Record that shutdown completed."""
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def application_starting(self, app_name: str, version: str) -> None:
        """Record that the application lifespan has begun."""
        self._logger.info("application_starting", app_name=app_name, version=version)

    def relay_started_in_process(self, broker_backend: str) -> None:
        """Record that the outbox relay was started inside the API process."""
        self._logger.info("outbox_relay_started_in_process", broker=broker_backend)

    def relay_disabled(self) -> None:
        """Record that the in-process relay is disabled by configuration."""
        self._logger.info("outbox_relay_disabled")

    def application_stopped(self) -> None:
        """Record that shutdown completed."""
        self._logger.info("application_stopped")
