"""Logging setup shared by the API process and the seed script."""
import logging

from nightguard.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Attach a single stream handler to the package logger."""
    logger = logging.getLogger("nightguard")
    logger.setLevel(level)

    # Create handler if not already set
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
