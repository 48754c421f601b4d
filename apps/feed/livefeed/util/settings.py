"""Runtime settings loaded from ``LIVEFEED_*`` environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_LOG_FORMATS = {"text", "json"}


@dataclass(slots=True)
class Settings:
    """Container for server settings."""

    host: str = "0.0.0.0"
    port: int = 3000
    event_log_path: Path = Path("locations.json")
    send_timeout: float = 5.0
    stream_queue_size: int = 100
    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_env(cls) -> "Settings":
        log_format = os.getenv("LIVEFEED_LOG_FORMAT", "text").lower()
        if log_format not in _LOG_FORMATS:
            raise ValueError(f"LIVEFEED_LOG_FORMAT must be 'text' or 'json', got {log_format!r}")
        return cls(
            host=os.getenv("LIVEFEED_HOST", "0.0.0.0"),
            port=_env_int("LIVEFEED_PORT", default=3000),
            event_log_path=Path(os.getenv("LIVEFEED_EVENT_LOG", "locations.json")),
            send_timeout=_env_float("LIVEFEED_SEND_TIMEOUT", default=5.0),
            stream_queue_size=_env_int("LIVEFEED_STREAM_QUEUE_SIZE", default=100),
            log_level=os.getenv("LIVEFEED_LOG_LEVEL", "INFO").upper(),
            log_format=log_format,
        )


def _env_int(name: str, *, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _env_float(name: str, *, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value
