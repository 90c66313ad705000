"""Logging setup for hosts embedding the engine."""
import logging
from typing import Optional

from draft_compass.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the package logger.

    Args:
        level: Log level name; defaults to the configured ``log_level``.
    """
    level_name = (level or get_settings().log_level).upper()
    package_logger = logging.getLogger("draft_compass")
    package_logger.setLevel(getattr(logging, level_name, logging.INFO))

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
