"""LiveFeed FastAPI application entrypoint."""
from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .api.collect import router as collect_router
from .api.stream import router as stream_router
from .api.subscribe import router as subscribe_router
from .core.dispatcher import BroadcastDispatcher
from .core.errors import LiveFeedError
from .core.ingest import IngestionService
from .core.registry import ConnectionRegistry
from .models.feed import ErrorResponse, StatusResponse
from .store.event_store import EventStore
from .util.settings import Settings

logger = logging.getLogger(__name__)

# Process start; /status uptime is measured from here.
PROCESS_STARTED_AT = time.monotonic()


async def _handle_feed_error(request: Request, exc: LiveFeedError) -> JSONResponse:
    body = ErrorResponse(error=exc.error_type, message=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


def create_app(
    settings: Settings | None = None,
    *,
    registry: ConnectionRegistry | None = None,
    store: EventStore | None = None,
) -> FastAPI:
    """Build the application with its registry, store and dispatcher wired in."""

    settings = settings or Settings.from_env()
    registry = registry or ConnectionRegistry()
    store = store or EventStore(settings.event_log_path)
    dispatcher = BroadcastDispatcher(registry, send_timeout=settings.send_timeout)

    app = FastAPI(title="LiveFeed", version=__version__)
    app.state.settings = settings
    app.state.registry = registry
    app.state.store = store
    app.state.dispatcher = dispatcher
    app.state.ingestion = IngestionService(store, dispatcher)

    app.add_exception_handler(LiveFeedError, _handle_feed_error)

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        closed = await registry.close_all()
        logger.info("Closed %d subscriber connection(s) on shutdown", closed)

    app.include_router(collect_router)
    app.include_router(subscribe_router)
    app.include_router(stream_router, prefix="/api")

    @app.get("/status", response_model=StatusResponse)
    def server_status(request: Request) -> StatusResponse:
        """Live subscriber count and uptime."""
        return StatusResponse(
            active_admins=request.app.state.registry.count(),
            uptime=time.monotonic() - PROCESS_STARTED_AT,
        )

    @app.get("/healthz")
    def healthcheck() -> dict[str, str]:
        """Basic health endpoint for readiness checks."""
        return {"status": "ok"}

    return app


app = create_app()
