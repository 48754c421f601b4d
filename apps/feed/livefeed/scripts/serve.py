"""Run the feed server with uvicorn."""
from __future__ import annotations

import logging

import uvicorn

from .. import __version__
from ..util.logging import setup_logging
from ..util.settings import Settings

logger = logging.getLogger("apps.feed.livefeed")

# Import string for uvicorn; the module-level app is the only one built.
APP_TARGET = "apps.feed.livefeed.main:app"


def main() -> None:
    settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_format)
    logger.info(
        "LiveFeed %s listening on %s:%d, events logged to %s",
        __version__,
        settings.host,
        settings.port,
        settings.event_log_path,
    )
    uvicorn.run(
        APP_TARGET,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
