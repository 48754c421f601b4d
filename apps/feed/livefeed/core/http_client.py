"""HTTP client for producers publishing to a feed server."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

_RETRY = dict(
    retry=retry_if_exception_type(httpx.TransportError),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
    stop=stop_after_attempt(3),
    reraise=True,
)


class FeedPublisher:
    """Helper for posting events to ``/collect`` and reading ``/status``."""

    def __init__(
        self,
        base_url: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 5.0,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )

    @retry(**_RETRY)
    async def publish(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        response = await self._client.post("/collect", json=dict(payload))
        response.raise_for_status()
        return response.json()

    @retry(**_RETRY)
    async def status(self) -> dict[str, Any]:
        response = await self._client.get("/status")
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        await self._client.aclose()


@asynccontextmanager
async def create_publisher(
    base_url: str,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[FeedPublisher]:
    publisher = FeedPublisher(base_url, transport=transport)
    try:
        yield publisher
    finally:
        await publisher.close()
