"""Process-wide logging configuration."""

import logging

from app.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings) -> None:
    """Configure the root logger from LOG_LEVEL. Safe to call more than once."""
    logging.basicConfig(level=settings.LOG_LEVEL, format=LOG_FORMAT)
    logging.getLogger().setLevel(settings.LOG_LEVEL)
    # SQL echo is controlled by DEBUG on the engine; keep the logger quiet otherwise.
    if not settings.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
