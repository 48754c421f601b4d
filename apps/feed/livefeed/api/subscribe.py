"""WebSocket subscription endpoint."""
from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, WebSocket, status

from ..core.connections import WebSocketConnection
from ..core.errors import RegistryClosedError, TransportError
from ..core.registry import ConnectionRegistry
from ..models.feed import ConnectionAck

logger = logging.getLogger(__name__)

router = APIRouter(tags=["subscribe"])


async def _read_until_disconnect(websocket: WebSocket) -> None:
    # Subscribers are receive-only; inbound frames are read and dropped.
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


@router.websocket("/")
@router.websocket("/ws")
async def subscribe(websocket: WebSocket) -> None:
    """Register a receive-only subscriber until its transport closes.

    The handler returns when the peer disconnects or when the server side
    closes the socket, for example after the dispatcher aborts a stalled
    subscriber.
    """

    registry: ConnectionRegistry = websocket.app.state.registry
    await websocket.accept()
    connection = WebSocketConnection(websocket)
    try:
        connection_id = registry.register(connection)
    except RegistryClosedError:
        await websocket.close(code=status.WS_1012_SERVICE_RESTART)
        return

    extra = {"connection_id": connection_id, "transport": connection.transport}
    logger.info("New subscriber connected: %s", connection_id, extra=extra)
    tasks: list[asyncio.Task[None]] = []
    try:
        await connection.send(ConnectionAck(id=connection_id).model_dump())
        reader = asyncio.create_task(_read_until_disconnect(websocket))
        ended = asyncio.create_task(connection.wait_ended())
        tasks = [reader, ended]
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        if reader in done:
            reader.result()
    except (TransportError, OSError) as exc:
        logger.warning("WebSocket error for %s: %r", connection_id, exc, extra=extra)
    finally:
        for task in tasks:
            task.cancel()
        registry.unregister(connection_id)
        connection.mark_closed()
        logger.info("Subscriber disconnected: %s", connection_id, extra=extra)
