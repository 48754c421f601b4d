"""Append-only NDJSON log of ingested events."""
from __future__ import annotations

import json
import threading
from asyncio import to_thread
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from ..core.errors import StoreError
from ..core.events import Event


class EventStore:
    """Durable sink writing one compact JSON object per line.

    Writes are serialised by a lock around the file handle and run in a
    worker thread so concurrent requests never interleave partial lines.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def append(self, event: Event) -> None:
        try:
            line = json.dumps(event.as_dict(), ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            raise StoreError(f"Event {event.id} is not serialisable") from exc
        await to_thread(self._write_line, line)

    def _write_line(self, line: str) -> None:
        with self._lock:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with self._path.open("a", encoding="utf-8") as handle:
                    handle.write(line + "\n")
                    handle.flush()
            except OSError as exc:
                raise StoreError(f"Failed to append to {self._path}: {exc.strerror or exc}") from exc

    def iter_events(self) -> Iterator[dict[str, Any]]:
        """Yield stored events oldest first."""
        if not self._path.exists():
            return
        with self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                if line.strip():
                    yield json.loads(line)
