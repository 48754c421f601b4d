"""Tests for event construction."""
from __future__ import annotations

import dataclasses
from datetime import UTC, datetime, timedelta, timezone

import pytest

from ..core.events import RequestMetadata, build_event, format_timestamp


def test_system_fields_override_producer_fields() -> None:
    metadata = RequestMetadata(
        origin="203.0.113.9",
        user_agent="Mozilla/5.0",
        received_at=datetime(2024, 5, 1, 12, 30, 45, 123456, tzinfo=UTC),
    )
    payload = {"lat": 1, "ip": "1.1.1.1", "timestamp": "yesterday", "targetId": "mine", "userAgent": "x"}

    event = build_event(payload, metadata, event_id="evt-9")

    assert event.as_dict() == {
        "lat": 1,
        "ip": "203.0.113.9",
        "timestamp": "2024-05-01T12:30:45.123Z",
        "targetId": "evt-9",
        "userAgent": "Mozilla/5.0",
    }


def test_timestamp_is_normalised_to_utc() -> None:
    moment = datetime(2024, 1, 1, 3, 0, tzinfo=timezone(timedelta(hours=3)))

    assert format_timestamp(moment) == "2024-01-01T00:00:00.000Z"


def test_event_is_immutable() -> None:
    payload = {"lat": 1}
    event = build_event(payload, RequestMetadata(origin=None, user_agent=None), event_id="e")

    payload["lat"] = 99
    assert event.as_dict()["lat"] == 1
    with pytest.raises(dataclasses.FrozenInstanceError):
        event.id = "other"  # type: ignore[misc]
    with pytest.raises(TypeError):
        event.payload["lat"] = 2  # type: ignore[index]
