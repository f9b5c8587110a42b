"""Logging setup for the storefront package.

Modules log through ``logging.getLogger(__name__)``; this attaches one
stream handler to the package logger so nothing is emitted twice.
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "storefront"


def configure_logging(level: str | int = "WARNING") -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)

    # Prevent propagation to the root logger (avoid duplicate lines)
    logger.propagate = False
    return logger
