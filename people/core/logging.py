"""Process-wide logging configuration."""

from __future__ import annotations

import logging

from people.core.config import Settings

_NOISY_LOGGERS = ("pymongo", "motor", "uvicorn.access")


def configure_logging(settings: Settings) -> None:
    """Install a root handler using the configured level and format."""

    logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)

    # Driver heartbeat chatter drowns out operation logs below WARNING.
    if not settings.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging configured at %s for %s (%s)", settings.LOG_LEVEL, settings.APP_NAME, settings.ENVIRONMENT
    )
