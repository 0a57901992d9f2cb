"""
Core Module - Logging Setup.

Single place where the root logger is configured. Library modules only
ever call logging.getLogger(__name__); entry points call
configure_logging() once at startup.
"""

from typing import Optional
import logging
import os


LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def configure_logging(level: Optional[str] = None) -> int:
    """
    Configure root logging.

    Args:
        level: Level name; falls back to LOG_LEVEL env, then INFO

    Returns:
        The numeric level applied
    """
    name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        numeric = logging.INFO

    logging.basicConfig(
        level=numeric,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )
    logging.getLogger().setLevel(numeric)
    return numeric


__all__ = ["configure_logging", "LOG_FORMAT", "DATE_FORMAT"]
