"""Logging configuration for the service."""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure root logging once at application start.

    Args:
        log_level: Level name (e.g., "INFO", "DEBUG")
    """
    logging.basicConfig(
        format=LOG_FORMAT,
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )
