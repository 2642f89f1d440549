"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import APIRouter, Depends, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse

from infrastructure.database.dependencies import (
    close_database_connections,
    verify_database_connection,
)
from infrastructure.database.exceptions import DatabaseConnectionError
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.outbox.dependencies import get_event_serializer, get_outbox_reader
from infrastructure.outbox.repository import OutboxRepository
from infrastructure.settings import get_broker_settings, get_outbox_settings, get_settings
from infrastructure.version import __version__
from orders.infrastructure.outbox import OrdersEventSerializer
from orders.presentation import routes as order_routes
from relay import build_outbox_relay
from shared_kernel.middleware import CorrelationIdMiddleware
from util import outbox_routes

# Register each bounded context's outbox serializer
get_event_serializer().register(OrdersEventSerializer())


@asynccontextmanager
async def outpost_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - In-process outbox relay (when enabled)
    - Database engine disposal on shutdown
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)

    probe = DefaultStartupProbe()
    probe.application_starting(settings.app_name, __version__)

    relay = None
    if get_outbox_settings().relay_enabled:
        relay = build_outbox_relay()
        await relay.start()
        probe.relay_started_in_process(get_broker_settings().backend)
    else:
        probe.relay_disabled()

    try:
        yield
    finally:
        if relay is not None:
            await relay.stop()
        await close_database_connections()
        probe.application_stopped()


app = FastAPI(
    title="Outpost API",
    description="Orders service with transactional outbox publishing",
    version=__version__,
    lifespan=outpost_lifespan,
)

app.add_middleware(CorrelationIdMiddleware)

api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(order_routes.router)
api_v1.include_router(outbox_routes.router)
app.include_router(api_v1)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db():
    """Check database connection health."""
    try:
        await verify_database_connection()
    except DatabaseConnectionError:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "connected": False},
        )

    return {"status": "ok", "connected": True}


@app.get("/health/outbox")
async def health_outbox(
    outbox: Annotated[OutboxRepository, Depends(get_outbox_reader)],
) -> dict:
    """Report outbox backlog.

    A growing pending count or an old oldest_pending_at means the relay is
    not keeping up or cannot reach the broker.
    """
    try:
        stats = await outbox.stats()
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Outbox statistics unavailable",
        )

    return {
        "pending": stats.pending,
        "failed": stats.failed,
        "processed": stats.processed,
        "oldest_pending_at": (
            stats.oldest_pending_at.isoformat() if stats.oldest_pending_at else None
        ),
    }
