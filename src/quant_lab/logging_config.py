"""Logging setup for scripts and apps.

The library only emits through ``loguru.logger``; sinks are configured here.
"""

from __future__ import annotations

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def setup_logging(level: str = "INFO", sink=sys.stderr) -> int:
    logger.remove()
    return logger.add(sink, format=LOG_FORMAT, level=level.upper(), colorize=False)
