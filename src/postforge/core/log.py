"""Logging setup for the served application."""

import logging
import os

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the process.

    Args:
        level: Level name; defaults to $POSTFORGE_LOG_LEVEL or INFO.
    """
    level_name = (level or os.environ.get("POSTFORGE_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=DEFAULT_FORMAT)

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
