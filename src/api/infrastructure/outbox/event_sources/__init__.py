"""Event sources for the outbox relay.

Event sources notify the relay of new outbox entries so it does not have
to wait for the next poll.
"""

from infrastructure.outbox.event_sources.postgres_notify import (
    PostgresNotifyEventSource,
)

__all__ = ["PostgresNotifyEventSource"]
