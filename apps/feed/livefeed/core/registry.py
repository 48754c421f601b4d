"""Registry of live subscriber connections."""
from __future__ import annotations

import logging
import threading

from .connections import ConnectionState, SubscriberConnection
from .errors import RegistryClosedError
from .ids import IdentifierFactory

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Thread-safe map of connection id to subscriber handle.

    The lock guards bookkeeping only. Nothing here sends on a connection
    while holding it; :meth:`close_all` detaches entries first and closes
    them afterwards.
    """

    def __init__(self, ids: IdentifierFactory | None = None) -> None:
        self._ids = ids or IdentifierFactory()
        self._connections: dict[str, SubscriberConnection] = {}
        self._lock = threading.Lock()
        self._accepting = True

    def register(self, connection: SubscriberConnection) -> str:
        with self._lock:
            if not self._accepting:
                raise RegistryClosedError()
            connection_id = self._ids.next_id()
            connection.state = ConnectionState.OPEN
            self._connections[connection_id] = connection
        return connection_id

    def unregister(self, connection_id: str) -> SubscriberConnection | None:
        """Remove ``connection_id``; unknown ids are ignored."""
        with self._lock:
            return self._connections.pop(connection_id, None)

    def snapshot_open(self) -> list[tuple[str, SubscriberConnection]]:
        with self._lock:
            return [
                (connection_id, connection)
                for connection_id, connection in self._connections.items()
                if connection.state is ConnectionState.OPEN
            ]

    def count(self) -> int:
        with self._lock:
            return len(self._connections)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, connection_id: object) -> bool:
        with self._lock:
            return connection_id in self._connections

    @property
    def accepting(self) -> bool:
        return self._accepting

    async def close_all(self) -> int:
        """Refuse new registrations and close every registered connection."""
        with self._lock:
            self._accepting = False
            entries = list(self._connections.items())
            self._connections.clear()
        for connection_id, connection in entries:
            logger.debug("Closing subscriber %s", connection_id, extra={"connection_id": connection_id})
            await connection.close()
        return len(entries)
