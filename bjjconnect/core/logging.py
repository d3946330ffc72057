# bjjconnect/core/logging.py
from __future__ import annotations

import logging
from logging.config import dictConfig

from bjjconnect.core.config import settings

_configured = False


def configure_logging(level: str | None = None) -> None:
    """
    Configure root logging once per process.

    Every module logs through ``logging.getLogger(__name__)``; business events
    use snake_case messages and pass context through ``extra=``.
    """
    global _configured
    if _configured:
        return

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {
                "handlers": ["console"],
                "level": (level or settings.LOG_LEVEL).upper(),
            },
            "loggers": {
                # SQL echo is controlled by DB_ECHO, keep the engine quiet otherwise
                "sqlalchemy.engine": {"level": "WARNING"},
            },
        }
    )
    _configured = True
    logging.getLogger(__name__).debug("logging_configured")
