"""Centralized logging configuration."""

import logging

from config import settings

# Libraries whose INFO output drowns out the analytics warnings
QUIET_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "alembic.runtime.migration",
    "uvicorn.access",
)


def setup_logging() -> None:
    """Configure logging for the application.

    Sets root logger level from settings.LOG_LEVEL. The ``api`` and
    ``services`` loggers inherit it, so rate and preference fallbacks are
    reported at WARNING while per-request detail shows at INFO/DEBUG.
    Chatty database, migration and access loggers are held at WARNING.
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)-8s %(name)s  %(message)s",
        datefmt="%H:%M:%S",
        level=getattr(logging, settings.LOG_LEVEL),
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
