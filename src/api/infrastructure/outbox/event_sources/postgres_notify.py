"""PostgreSQL NOTIFY-based event source for the outbox relay.

The outbox table carries an AFTER INSERT trigger that calls
pg_notify(channel, NEW.id). PostgreSQL delivers the notification only when
the writing transaction commits, so the relay never hears about rows it
cannot see yet. asyncpg-listen provides reconnection handling.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from uuid import UUID

from asyncpg_listen import (
    ListenPolicy,
    NotificationListener,
    NotificationOrTimeout,
    Timeout,
    connect_func,
)

from shared_kernel.outbox.observability import (
    DefaultEventSourceProbe,
    EventSourceProbe,
)
from shared_kernel.outbox.ports import OutboxEventSource


class PostgresNotifyEventSource(OutboxEventSource):
    """Invokes a callback with the entry UUID for each outbox NOTIFY.

    Notifications are a latency optimisation only. Anything missed while
    disconnected is picked up by the relay's poll loop.
    """

    def __init__(
        self,
        db_url: str,
        channel: str = "outbox_events",
        probe: EventSourceProbe | None = None,
    ) -> None:
        """Initialize the NOTIFY event source.

        Args:
            db_url: Plain PostgreSQL DSN (postgresql://...), no driver suffix
            channel: NOTIFY channel name
            probe: Optional observability probe (default: DefaultEventSourceProbe)
        """
        self._db_url = db_url
        self._channel = channel
        self._probe = probe or DefaultEventSourceProbe()
        self._on_event: Callable[[UUID], Awaitable[None]] | None = None
        self._running = False
        self._listener: NotificationListener | None = None
        self._listener_task: asyncio.Task[None] | None = None

    @property
    def channel(self) -> str:
        """The NOTIFY channel this source listens on."""
        return self._channel

    @property
    def is_running(self) -> bool:
        """Whether start() is active and stop() has not been called."""
        return self._running

    async def _handle_notification(self, notification: NotificationOrTimeout) -> None:
        if not self._running:
            return

        # asyncpg-listen yields Timeout when nothing arrived within the window
        if isinstance(notification, Timeout):
            return

        if not notification.payload:
            return

        try:
            entry_id = UUID(notification.payload)
        except (ValueError, TypeError):
            self._probe.invalid_notification_ignored(
                notification.payload, "Invalid UUID format"
            )
            return

        self._probe.notification_received(entry_id)
        if self._on_event is not None:
            await self._on_event(entry_id)

    async def start(self, on_event: Callable[[UUID], Awaitable[None]]) -> None:
        """Start listening for NOTIFY events.

        Blocks until stop() is called or the listener fails.

        Args:
            on_event: Async callback to invoke with each valid entry UUID
        """
        self._on_event = on_event
        self._running = True

        try:
            self._listener = NotificationListener(connect_func(self._db_url))
            self._probe.event_source_started(self._channel)

            self._listener_task = asyncio.create_task(
                self._listener.run(
                    {self._channel: self._handle_notification},
                    policy=ListenPolicy.ALL,
                )
            )
            await self._listener_task
        except asyncio.CancelledError:
            # stop() cancelled the listener task
            pass
        except Exception as e:
            self._probe.listener_error(str(e))
            raise

    async def stop(self) -> None:
        """Stop the event source and clean up resources."""
        self._running = False

        if self._listener_task and not self._listener_task.done():
            self._listener_task.cancel()
            try:
                await self._listener_task
            except asyncio.CancelledError:
                pass

        self._listener_task = None
        self._probe.event_source_stopped()
