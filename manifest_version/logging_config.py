"""Logging setup for the command line entry point."""

from __future__ import annotations

import logging
import sys
from typing import Union

PACKAGE_LOGGER = "manifest_version"


def setup_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Send package log records to stderr at the given level."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError("Unknown log level.")

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    package_logger.handlers = [handler]
