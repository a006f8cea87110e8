from __future__ import annotations

import logging
import sys
from typing import Optional


def get_logger(
    name: str,
    level: int = logging.INFO,
    stream: Optional[object] = None,
) -> logging.Logger:
    """
    Return a logger with the project's single-line format.

    Parameters
    ----------
    name:
        Logger name (usually __name__ of the module).
    level:
        Logging level (default: logging.INFO).
    stream:
        Stream to write logs to. Defaults to sys.stdout.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        logger.setLevel(level)
        return logger

    logger.setLevel(level)
    handler = logging.StreamHandler(stream or sys.stdout)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def set_package_level(level: int | str) -> None:
    """Apply a level to every logger already created under this package."""
    resolved = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    prefix = __name__.split(".")[0]
    for name, logger in logging.Logger.manager.loggerDict.items():
        if name.startswith(prefix) and isinstance(logger, logging.Logger):
            logger.setLevel(resolved)
