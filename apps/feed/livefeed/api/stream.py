"""Server-sent events subscription endpoint."""
from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Request
from sse_starlette.sse import EventSourceResponse

from ..core.connections import StreamConnection
from ..core.errors import RegistryClosedError
from ..core.registry import ConnectionRegistry
from ..models.feed import ConnectionAck

logger = logging.getLogger(__name__)

router = APIRouter(tags=["stream"])


async def event_stream(
    registry: ConnectionRegistry,
    connection: StreamConnection,
) -> AsyncIterator[dict[str, str]]:
    """Register ``connection`` and yield SSE events until it ends."""

    try:
        connection_id = registry.register(connection)
    except RegistryClosedError:
        return

    extra = {"connection_id": connection_id, "transport": connection.transport}
    logger.info("New subscriber connected: %s", connection_id, extra=extra)
    try:
        ack = ConnectionAck(id=connection_id).model_dump()
        yield {"event": ack["type"], "data": json.dumps(ack)}
        while True:
            message = await connection.receive()
            if message is None:
                break
            yield {"event": message["type"], "data": json.dumps(message)}
    finally:
        registry.unregister(connection_id)
        connection.mark_closed()
        logger.info("Subscriber disconnected: %s", connection_id, extra=extra)


@router.get("/stream")
async def stream_events(request: Request) -> EventSourceResponse:
    """Subscribe to the live feed over server-sent events."""

    connection = StreamConnection(request.app.state.settings.stream_queue_size)
    return EventSourceResponse(event_stream(request.app.state.registry, connection))
