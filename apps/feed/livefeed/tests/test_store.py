"""Tests for the NDJSON event store."""
from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from ..core.errors import StoreError
from ..core.events import RequestMetadata, build_event
from ..store.event_store import EventStore


def _event(index: int):
    return build_event(
        {"seq": index, "note": "café"},
        RequestMetadata(origin="127.0.0.1", user_agent="pytest"),
        event_id=f"evt-{index}",
    )


@pytest.mark.asyncio
async def test_append_writes_one_line_per_event(tmp_path: Path) -> None:
    store = EventStore(tmp_path / "logs" / "events.ndjson")
    first, second = _event(1), _event(2)

    await store.append(first)
    await store.append(second)

    lines = store.path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert json.loads(lines[0]) == first.as_dict()
    assert "café" in lines[0]
    assert [entry["targetId"] for entry in store.iter_events()] == ["evt-1", "evt-2"]


@pytest.mark.asyncio
async def test_concurrent_appends_do_not_interleave(tmp_path: Path) -> None:
    store = EventStore(tmp_path / "events.ndjson")

    await asyncio.gather(*(store.append(_event(index)) for index in range(50)))

    entries = list(store.iter_events())
    assert len(entries) == 50
    assert {entry["seq"] for entry in entries} == set(range(50))


@pytest.mark.asyncio
async def test_append_failure_raises_store_error(tmp_path: Path) -> None:
    # A directory cannot be opened for appending.
    store = EventStore(tmp_path)

    with pytest.raises(StoreError):
        await store.append(_event(1))


def test_iter_events_on_missing_log_is_empty(tmp_path: Path) -> None:
    assert list(EventStore(tmp_path / "absent.ndjson").iter_events()) == []
