"""Loguru sink configuration shared by main.py and the API app."""

import sys

from loguru import logger

VALID_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO") -> str:
    """
    Replace loguru's default sink with a stderr sink at the given level.

    Returns:
        str: the level actually applied (unknown levels fall back to INFO)
    """
    level = (level or "INFO").upper()
    if level not in VALID_LEVELS:
        level = "INFO"

    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
    return level
