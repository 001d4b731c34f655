"""
Logging helpers for conctrack.

Library modules only ever call ``get_logger(__name__)``; handlers are
installed by the application through ``setup_logging``.

Usage:
    from conctrack.logger import get_logger, setup_logging

    setup_logging(log_level="DEBUG")
    logger = get_logger(__name__)
    logger.debug("No profile for %s/%s", substance, route)
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import colorlog

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
COLOR_FORMAT = '%(log_color)s%(levelname)-8s%(reset)s %(blue)s%(name)s%(reset)s - %(message)s'

LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}


def setup_logging(log_level: str = 'INFO', log_dir: Optional[Path] = None,
                  logger_name: str = 'conctrack') -> logging.Logger:
    """
    Configure console (colored) and optional file logging for the package logger.

    Args:
        log_level: 'DEBUG', 'INFO', 'WARNING' or 'ERROR'
        log_dir: directory for ``conctrack.log``; console only when None
        logger_name: logger to configure, the package root by default

    Returns:
        The configured logger.
    """
    level = getattr(logging, log_level.upper())

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = colorlog.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(colorlog.ColoredFormatter(
        COLOR_FORMAT,
        log_colors=LOG_COLORS,
        reset=True,
        style='%'
    ))
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / "conctrack.log")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module (pass ``__name__``)."""
    return logging.getLogger(name)
