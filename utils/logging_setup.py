"""Process-wide logging configuration for the console and its scripts."""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "WARNING") -> int:
    """Install a stream handler at ``level`` and return the numeric level.

    Unknown level names fall back to ``WARNING``.
    """

    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            numeric = logging.WARNING
    else:
        numeric = int(level)
    logging.basicConfig(level=numeric, format=LOG_FORMAT, force=True)
    return numeric


__all__ = ["LOG_FORMAT", "configure_logging"]
