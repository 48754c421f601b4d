"""Event ingestion endpoint."""
from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request

from ..core.errors import InternalError, LiveFeedError, ValidationError
from ..core.events import RequestMetadata
from ..core.ingest import IngestionService
from ..models.feed import CollectResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["collect"])


def _request_metadata(request: Request) -> RequestMetadata:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        origin = forwarded.split(",")[0].strip()
    else:
        origin = request.client.host if request.client else None
    return RequestMetadata(origin=origin, user_agent=request.headers.get("user-agent"))


@router.post(
    "/collect",
    response_model=CollectResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def collect(request: Request) -> CollectResponse:
    """Persist a producer event and broadcast it to live subscribers."""

    service: IngestionService = request.app.state.ingestion
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationError("Request body must be valid JSON") from exc
    except RecursionError as exc:
        raise ValidationError("Request body is nested too deeply") from exc

    try:
        result = await service.ingest(payload, _request_metadata(request))
    except LiveFeedError:
        raise
    except Exception as exc:
        logger.exception("Error handling /collect request")
        raise InternalError() from exc

    return CollectResponse(delivered=result.delivered, stored=result.stored)
