"""Ingestion: enrich, persist, broadcast."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..store.event_store import EventStore
from ..util.schema import SchemaValidationError, validate
from .dispatcher import BroadcastDispatcher
from .errors import StoreError, ValidationError
from .events import Event, RequestMetadata, build_event
from .ids import IdentifierFactory

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IngestResult:
    event: Event
    delivered: int
    stored: bool


class IngestionService:
    """Turn a producer payload into an event and fan it out.

    Persistence is best effort: a :class:`StoreError` is logged and recorded
    on the result, and the broadcast still happens.
    """

    def __init__(
        self,
        store: EventStore,
        dispatcher: BroadcastDispatcher,
        *,
        ids: IdentifierFactory | None = None,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher
        self._ids = ids or IdentifierFactory()

    async def ingest(self, payload: Any, metadata: RequestMetadata) -> IngestResult:
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        try:
            validate(payload, schema_name="collect_payload")
        except SchemaValidationError as exc:
            raise ValidationError(f"Payload failed validation at {exc.path or '<root>'}") from exc

        event = build_event(payload, metadata, event_id=self._ids.next_id())
        logger.info(
            "Event captured from %s",
            event.origin,
            extra={"event_id": event.id, "origin": event.origin},
        )

        stored = True
        try:
            await self._store.append(event)
        except StoreError:
            stored = False
            logger.exception("Failed to persist event %s", event.id, extra={"event_id": event.id})

        delivered = await self._dispatcher.broadcast(event)
        return IngestResult(event=event, delivered=delivered, stored=stored)
