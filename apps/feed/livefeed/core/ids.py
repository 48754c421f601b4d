"""Identifier generation for connections and events."""
from __future__ import annotations

import itertools
import secrets
import threading


class IdentifierFactory:
    """Issue ids that never repeat within the process.

    Each factory draws a random prefix once and appends a monotonic counter,
    so ids are unique without consulting whoever stores them.
    """

    def __init__(self, prefix: str | None = None) -> None:
        self._prefix = prefix if prefix is not None else secrets.token_hex(4)
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    @property
    def prefix(self) -> str:
        return self._prefix

    def next_id(self) -> str:
        with self._lock:
            value = next(self._counter)
        return f"{self._prefix}{value:x}"
