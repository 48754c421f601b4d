"""Broadcast of events to every open subscriber."""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..models.feed import LocationUpdate
from .connections import SubscriberConnection
from .errors import TransportError
from .events import Event
from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class BroadcastDispatcher:
    """Fan one event out to a snapshot of the registry.

    Failed or slow sends abort the connection: it is marked ``CLOSING`` and
    its transport is closed in the background. It stays registered until
    the transport handler notices the close and unregisters it.
    """

    def __init__(self, registry: ConnectionRegistry, *, send_timeout: float = 5.0) -> None:
        self._registry = registry
        self._send_timeout = send_timeout

    async def broadcast(self, event: Event) -> int:
        """Send ``event`` to every open connection; return the delivery count."""
        message = LocationUpdate(data=event.as_dict()).model_dump()
        targets = self._registry.snapshot_open()
        results = await asyncio.gather(
            *(self._deliver(connection_id, connection, message) for connection_id, connection in targets)
        )
        delivered = sum(results)
        logger.info(
            "Broadcast sent to %d of %d subscriber(s)",
            delivered,
            len(targets),
            extra={"event_id": event.id, "delivered": delivered},
        )
        return delivered

    async def _deliver(
        self,
        connection_id: str,
        connection: SubscriberConnection,
        message: dict[str, Any],
    ) -> bool:
        if not connection.is_open:
            return False
        try:
            await asyncio.wait_for(connection.send(message), timeout=self._send_timeout)
        except TransportError as exc:
            logger.warning(
                "Delivery to %s failed: %s",
                connection_id,
                exc.message,
                extra={"connection_id": connection_id},
            )
            connection.abort()
            return False
        except TimeoutError:
            logger.warning(
                "Delivery to %s timed out after %.1fs",
                connection_id,
                self._send_timeout,
                extra={"connection_id": connection_id},
            )
            connection.abort()
            return False
        return True
