"""Logging configuration."""

import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "KUBEROLL_LOG_LEVEL"


def _default_level() -> int:
    level = logging.getLevelName(os.environ.get(LOG_LEVEL_ENV, "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a configured logger instance."""
    logger = logging.getLogger(name or __name__)

    # Only configure if no handlers exist
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(_default_level())

    return logger


def set_level(level: int) -> None:
    """Apply a log level to every kuberoll logger created so far."""
    for name, logger in logging.Logger.manager.loggerDict.items():
        if name.startswith("kuberoll") and isinstance(logger, logging.Logger):
            logger.setLevel(level)
