"""Event envelope and the merge of producer data with request provenance."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any


def _utcnow() -> datetime:
    return datetime.now(UTC)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class RequestMetadata:
    """Provenance captured by the server for one ingestion request."""

    origin: str | None
    user_agent: str | None
    received_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True, slots=True)
class Event:
    """One ingested event; never mutated after construction."""

    id: str
    payload: Mapping[str, Any]
    origin: str | None
    user_agent: str | None
    timestamp: str

    def as_dict(self) -> dict[str, Any]:
        """Flat wire form; system fields override producer keys."""
        return {
            **self.payload,
            "ip": self.origin,
            "userAgent": self.user_agent,
            "timestamp": self.timestamp,
            "targetId": self.id,
        }


def build_event(payload: Mapping[str, Any], metadata: RequestMetadata, *, event_id: str) -> Event:
    return Event(
        id=event_id,
        payload=MappingProxyType(dict(payload)),
        origin=metadata.origin,
        user_agent=metadata.user_agent,
        timestamp=format_timestamp(metadata.received_at),
    )
