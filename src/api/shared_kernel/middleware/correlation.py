"""Correlation ID middleware.

Reads the X-Correlation-ID request header, or generates an id when it is
missing or unusable, and makes it available for the rest of the request:

- bound into structlog's contextvars, so every log line carries it
- readable through get_correlation_id(), so writers can store it on
  outbox entries and the relay can forward it to the broker
- echoed in the response header
"""

from __future__ import annotations

import re
from contextvars import ContextVar
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog
from starlette.datastructures import Headers, MutableHeaders

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

CORRELATION_ID_HEADER = "X-Correlation-ID"

# Matches outbox.correlation_id column width
MAX_CORRELATION_ID_LENGTH = 64

_VALID_CORRELATION_ID = re.compile(r"^[A-Za-z0-9._:\-]+$")

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Return the correlation id of the current request, if any."""
    return _correlation_id.get()


def is_valid_correlation_id(value: str) -> bool:
    """Check that a client-supplied id is short and header/log safe."""
    return (
        0 < len(value) <= MAX_CORRELATION_ID_LENGTH
        and _VALID_CORRELATION_ID.match(value) is not None
    )


class CorrelationIdMiddleware:
    """Pure ASGI middleware binding a correlation id to each HTTP request."""

    def __init__(self, app: ASGIApp, header_name: str = CORRELATION_ID_HEADER) -> None:
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        incoming = Headers(scope=scope).get(self.header_name)
        if incoming is not None and is_valid_correlation_id(incoming):
            correlation_id = incoming
        else:
            correlation_id = str(uuid4())

        scope.setdefault("state", {})["correlation_id"] = correlation_id

        token = _correlation_id.set(correlation_id)
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

        async def send_with_correlation_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                headers[self.header_name] = correlation_id
            await send(message)

        try:
            await self.app(scope, receive, send_with_correlation_id)
        finally:
            structlog.contextvars.unbind_contextvars("correlation_id")
            _correlation_id.reset(token)
