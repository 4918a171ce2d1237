"""Logging setup for Delaycoach MCP.

The MCP stdio transport owns stdout, so logs always go to stderr.
"""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    """Install a single stderr handler on the package logger."""
    logger = logging.getLogger("delaycoach_mcp")
    logger.setLevel(level.upper())

    for handler in list(logger.handlers):
        if getattr(handler, "_delaycoach", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._delaycoach = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False
