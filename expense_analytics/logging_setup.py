"""Logging configuration for the ``expense_analytics`` package.

Library modules obtain loggers through :func:`get_logger` and never attach
handlers themselves.  Entry points such as the CLI call
:func:`configure_logging` once at startup.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Optional

_PKG_LOGGER_NAME = "expense_analytics"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv("EXPENSE_ANALYTICS_LOG_LEVEL")
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    return logging.WARNING


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Attach a single ``StreamHandler`` to the package logger.

    Parameters
    ----------
    level:
        Level as ``int`` or name (``"DEBUG"``).  ``None`` falls back to
        ``EXPENSE_ANALYTICS_LOG_LEVEL`` and then ``WARNING``.
    fmt:
        Optional format string.
    stream:
        Output stream, ``sys.stderr`` at call time by default.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s"))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return ``name``'s logger, silencing the package until it is configured."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
