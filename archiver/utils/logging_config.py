"""Central logging configuration for archiver.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers themselves. The CLI calls `configure_logging` once.
"""

from __future__ import annotations

import logging
import os

_LEVEL_MAP = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}


def configure_logging(level: str | int | None = None, *, force: bool = False) -> None:
    """Configure root logger.

    Order of precedence for level:
    1. Explicit `level` argument if given
    2. Environment variable `ARCHIVER_LOG_LEVEL`
    3. Fallback to `INFO`
    """
    if level is None:
        level = os.environ.get("ARCHIVER_LOG_LEVEL", "INFO")

    if isinstance(level, str):
        level = _LEVEL_MAP.get(level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=force,
    )


__all__ = ["configure_logging"]
