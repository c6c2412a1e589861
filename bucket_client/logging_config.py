"""Logging configuration for applications using the bucket client."""

import logging
from typing import Optional

from .settings import get_setting


def setup_console_logging(level: Optional[str] = None) -> logging.Logger:
    """Set up console logging.

    Args:
        level: Log level name. Defaults to BUCKET_LOG_LEVEL, then WARNING.

    Returns:
        The bucket_client package logger.
    """
    console_level = level or get_setting("BUCKET_LOG_LEVEL", "WARNING")
    logging.basicConfig(
        level=getattr(logging, console_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    return logging.getLogger("bucket_client")
