"""Tests for the ``livefeed`` server command."""
from __future__ import annotations

import logging

import pytest

from ..scripts import serve


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_serves_the_module_level_app(restore_root_logger, monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr(serve.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))
    monkeypatch.setenv("LIVEFEED_PORT", "3100")
    monkeypatch.setenv("LIVEFEED_HOST", "127.0.0.1")

    serve.main()

    ((target, kwargs),) = calls
    assert target == "apps.feed.livefeed.main:app"
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 3100
    assert kwargs["log_config"] is None
