"""Outbox relay wiring and standalone entry point.

The relay runs inside the API process when OUTPOST_OUTBOX_RELAY_ENABLED is
true (see main.py). It can also run as its own process:

    outpost-relay        # console script
    python -m relay      # from src/api

Several relay processes may run side by side; row locks keep them from
publishing the same entry concurrently.
"""

from __future__ import annotations

import asyncio
import signal

from infrastructure.database.dependencies import (
    close_database_connections,
    get_write_sessionmaker,
)
from infrastructure.database.engines import build_listen_dsn
from infrastructure.logging import configure_logging
from infrastructure.messaging import create_publisher
from infrastructure.outbox.composite import CompositeTranslator
from infrastructure.outbox.event_sources import PostgresNotifyEventSource
from infrastructure.outbox.relay import OutboxRelay
from infrastructure.settings import (
    get_broker_settings,
    get_database_settings,
    get_outbox_settings,
    get_settings,
)
from orders.infrastructure.outbox import OrdersMessageTranslator
from shared_kernel.outbox.observability import (
    DefaultOutboxRelayProbe,
    OutboxRelayProbe,
)


def build_message_translator(probe: OutboxRelayProbe | None = None) -> CompositeTranslator:
    """Register every bounded context's translator on one composite."""
    translator = CompositeTranslator(probe=probe)
    translator.register(OrdersMessageTranslator(), context_name="orders")
    return translator


def build_outbox_relay() -> OutboxRelay:
    """Build an OutboxRelay from settings.

    Returns:
        A relay that has not been started yet
    """
    outbox_settings = get_outbox_settings()
    probe = DefaultOutboxRelayProbe()

    event_source = None
    if outbox_settings.listen_enabled:
        event_source = PostgresNotifyEventSource(
            db_url=build_listen_dsn(get_database_settings()),
            channel=outbox_settings.notify_channel,
        )

    return OutboxRelay(
        session_factory=get_write_sessionmaker(),
        publisher=create_publisher(get_broker_settings()),
        translator=build_message_translator(probe),
        probe=probe,
        event_source=event_source,
        poll_interval_seconds=outbox_settings.poll_interval_seconds,
        batch_size=outbox_settings.batch_size,
        max_retries=outbox_settings.max_retries,
        retention_hours=outbox_settings.retention_hours,
    )


async def run_relay() -> None:
    """Run the relay until SIGINT or SIGTERM."""
    relay = build_outbox_relay()
    stop_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    await relay.start()
    try:
        await stop_event.wait()
    finally:
        await relay.stop()
        await close_database_connections()


def main() -> None:
    configure_logging(debug=get_settings().debug)
    asyncio.run(run_relay())


if __name__ == "__main__":
    main()
