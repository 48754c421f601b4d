"""Subscriber connection handles for the transports the feed serves."""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any

from starlette import status
from starlette.websockets import WebSocket, WebSocketDisconnect, WebSocketState

from .errors import TransportError

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


class SubscriberConnection:
    """A registered subscriber's send side.

    ``send`` raises :class:`TransportError` on any transport fault; callers
    never see the transport's own exception types.
    """

    transport = "unknown"

    def __init__(self) -> None:
        self.state = ConnectionState.OPEN

    @property
    def is_open(self) -> bool:
        return self.state is ConnectionState.OPEN

    def mark_closing(self) -> None:
        if self.state is ConnectionState.OPEN:
            self.state = ConnectionState.CLOSING

    def mark_closed(self) -> None:
        self.state = ConnectionState.CLOSED

    def abort(self) -> None:
        """Stop delivering to this subscriber and start tearing its transport down.

        Called by the dispatcher after a failed or timed-out send. It does not
        block; the transport's own handler unregisters the connection.
        """
        self.mark_closing()

    async def send(self, message: dict[str, Any]) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        self.mark_closed()


class WebSocketConnection(SubscriberConnection):
    """WebSocket subscriber; sends are serialised per connection."""

    transport = "websocket"

    def __init__(self, websocket: WebSocket, *, close_timeout: float = 5.0) -> None:
        super().__init__()
        self._websocket = websocket
        self._send_lock = asyncio.Lock()
        self._close_timeout = close_timeout
        self._closer: asyncio.Task[None] | None = None
        self._ended = asyncio.Event()

    async def send(self, message: dict[str, Any]) -> None:
        async with self._send_lock:
            if not self.is_open:
                raise TransportError("Connection is not open")
            try:
                await self._websocket.send_json(message)
            except (WebSocketDisconnect, RuntimeError, OSError) as exc:
                self.mark_closing()
                raise TransportError(f"WebSocket send failed: {exc!r}") from exc

    def abort(self) -> None:
        self.mark_closing()
        if self._closer is None and not self._ended.is_set():
            self._closer = asyncio.get_running_loop().create_task(
                self.close(code=status.WS_1011_INTERNAL_ERROR)
            )

    async def wait_ended(self) -> None:
        """Block until the server side of the socket has been closed."""
        await self._ended.wait()

    async def close(self, code: int = status.WS_1001_GOING_AWAY) -> None:
        if self.state is ConnectionState.CLOSED:
            self._ended.set()
            return
        self.mark_closing()
        try:
            if self._websocket.application_state is WebSocketState.CONNECTED:
                await asyncio.wait_for(self._websocket.close(code=code), timeout=self._close_timeout)
        except (RuntimeError, OSError) as exc:
            logger.debug("WebSocket already gone while closing: %r", exc)
        except TimeoutError:
            logger.warning("WebSocket close did not complete within %.1fs", self._close_timeout)
        finally:
            self.mark_closed()
            self._ended.set()


class StreamConnection(SubscriberConnection):
    """Queue-backed subscriber drained by a server-sent events response."""

    transport = "sse"

    def __init__(self, max_queue_size: int = 100) -> None:
        super().__init__()
        self._max_queue_size = max_queue_size
        # One slot past the bound is kept free for the end-of-stream marker.
        self._queue: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue(max_queue_size + 1)

    async def send(self, message: dict[str, Any]) -> None:
        if not self.is_open:
            raise TransportError("Stream is not open")
        if self._queue.qsize() >= self._max_queue_size:
            self._end(ConnectionState.CLOSING)
            raise TransportError("Subscriber queue is full")
        self._queue.put_nowait(message)

    def abort(self) -> None:
        self._end(ConnectionState.CLOSING)

    async def close(self) -> None:
        self._end(ConnectionState.CLOSED)

    async def receive(self) -> dict[str, Any] | None:
        """Next queued message, or ``None`` once the stream has ended."""
        return await self._queue.get()

    def _end(self, state: ConnectionState) -> None:
        if self.state is ConnectionState.OPEN:
            self._queue.put_nowait(None)
        if self.state is not ConnectionState.CLOSED:
            self.state = state
