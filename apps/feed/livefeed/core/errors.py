"""Exception hierarchy for the live feed.

The application's error handler turns these into ``{status, error, message}``
JSON bodies; only ``message`` and the class-level ``error_type`` ever reach a
client.
"""
from __future__ import annotations


class LiveFeedError(Exception):
    """Base exception for all live feed errors."""

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str = "Internal server error") -> None:
        self.message = message
        super().__init__(message)


class InternalError(LiveFeedError):
    """Unanticipated fault while handling a request."""


class StoreError(LiveFeedError):
    """Durable write failed (disk, permissions, serialisation)."""

    status_code = 503
    error_type = "storage_error"


class TransportError(LiveFeedError):
    """Send or receive failed on a single subscriber connection."""

    status_code = 502
    error_type = "transport_error"


class ValidationError(LiveFeedError):
    """Inbound payload cannot be turned into an event."""

    status_code = 400
    error_type = "validation_error"


class RegistryClosedError(LiveFeedError):
    """The registry stopped accepting subscribers (process shutdown)."""

    status_code = 503
    error_type = "shutting_down"

    def __init__(self, message: str = "Server is shutting down") -> None:
        super().__init__(message)
