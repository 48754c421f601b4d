"""Logging setup for the server process.

``text`` format is meant for a terminal; ``json`` emits one object per line
for log shippers. Extras passed with ``extra=`` (``event_id``,
``connection_id``, ``delivered``...) become JSON fields.
"""
from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Configure the root logger; safe to call more than once."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO

    root = logging.getLogger()
    root.setLevel(numeric)
    # Drop handlers from earlier calls so records are not emitted twice.
    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(numeric)
    if fmt == "json":
        handler.setFormatter(
            JsonFormatter(
                fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    root.addHandler(handler)
