"""Tests for the connection registry."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from ..core.connections import ConnectionState
from ..core.errors import RegistryClosedError
from ..core.ids import IdentifierFactory
from ..core.registry import ConnectionRegistry
from .fakes import RecordingConnection


def test_concurrent_register_yields_distinct_ids() -> None:
    registry = ConnectionRegistry()
    connections = [RecordingConnection() for _ in range(500)]

    with ThreadPoolExecutor(max_workers=16) as pool:
        ids = list(pool.map(registry.register, connections))

    assert len(set(ids)) == 500
    assert all(ids)
    assert registry.count() == 500


def test_register_marks_connection_open() -> None:
    registry = ConnectionRegistry()
    connection = RecordingConnection()
    connection.state = ConnectionState.CLOSED

    connection_id = registry.register(connection)

    assert connection.state is ConnectionState.OPEN
    assert connection_id in registry


def test_unregister_is_idempotent() -> None:
    registry = ConnectionRegistry()
    keep = registry.register(RecordingConnection())
    drop = registry.register(RecordingConnection())

    assert registry.unregister(drop) is not None
    assert registry.count() == 1
    assert registry.unregister(drop) is None
    assert registry.unregister("never-registered") is None
    assert registry.count() == 1
    assert keep in registry


def test_ids_are_not_reused_after_removal() -> None:
    registry = ConnectionRegistry(IdentifierFactory(prefix="p"))
    first = registry.register(RecordingConnection())
    registry.unregister(first)

    second = registry.register(RecordingConnection())

    assert second != first


def test_snapshot_only_includes_open_connections() -> None:
    registry = ConnectionRegistry()
    open_id = registry.register(RecordingConnection())
    closing = RecordingConnection()
    registry.register(closing)
    closing.mark_closing()

    snapshot = registry.snapshot_open()

    assert [connection_id for connection_id, _ in snapshot] == [open_id]
    assert registry.count() == 2


def test_snapshot_is_detached_from_later_mutation() -> None:
    registry = ConnectionRegistry()
    ids = [registry.register(RecordingConnection()) for _ in range(3)]

    snapshot = registry.snapshot_open()
    for connection_id, _ in snapshot:
        registry.unregister(connection_id)
    registry.register(RecordingConnection())

    assert [connection_id for connection_id, _ in snapshot] == ids
    assert registry.count() == 1


@pytest.mark.asyncio
async def test_close_all_closes_connections_and_refuses_new_ones() -> None:
    registry = ConnectionRegistry()
    connections = [RecordingConnection() for _ in range(3)]
    for connection in connections:
        registry.register(connection)

    closed = await registry.close_all()

    assert closed == 3
    assert registry.count() == 0
    assert all(connection.closed for connection in connections)
    assert not registry.accepting
    with pytest.raises(RegistryClosedError):
        registry.register(RecordingConnection())
