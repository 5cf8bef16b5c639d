# log.py
# SPDX-License-Identifier: MIT
"""Logging helpers for reusescan.

Library code logs through :func:`get_logger` and never configures output
itself; the package logger carries a NullHandler until the CLI or a host
application calls :func:`configure_logging`.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

__all__ = [
    "PACKAGE_LOGGER_NAME",
    "DEFAULT_FORMAT",
    "get_logger",
    "configure_logging",
    "temp_level",
]

PACKAGE_LOGGER_NAME = "reusescan"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


def _level_value(level: int | str) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``name``'s logger, or the package logger when omitted."""
    return logging.getLogger(name or PACKAGE_LOGGER_NAME)


def _stream_handlers(logger: logging.Logger) -> list[logging.StreamHandler]:
    return [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: TextIO | None = None,
    fmt: str | None = None,
    datefmt: str | None = None,
    propagate: bool | None = None,
    logger_name: str = PACKAGE_LOGGER_NAME,
) -> logging.Logger:
    """Send a reusescan logger's records to a stream.

    Calling this again does not stack handlers: the existing stream
    handler is kept, and pointed at the new stream if its old one was
    closed in the meantime.

    Args:
        level (int | str): Level number or name such as ``"DEBUG"``.
        stream (TextIO | None): Destination; ``sys.stderr`` by default.
        fmt (str | None): Record format; :data:`DEFAULT_FORMAT` when None.
        datefmt (str | None): Timestamp format.
        propagate (bool | None): Pass records on to ancestor loggers. None
            means yes, so pytest's caplog still sees them.
        logger_name (str): Logger to configure.

    Returns:
        logging.Logger: The configured logger.
    """
    logger = get_logger(logger_name)
    logger.setLevel(_level_value(level))
    logger.propagate = propagate is None or bool(propagate)
    target = stream if stream is not None else sys.stderr

    existing = _stream_handlers(logger)
    if not existing:
        handler = logging.StreamHandler(target)
        handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT, datefmt))
        logger.addHandler(handler)
    for handler in existing:
        if getattr(handler.stream, "closed", False):
            handler.setStream(target)
    return logger


@contextmanager
def temp_level(level: int | str, name: str | None = None) -> Iterator[logging.Logger]:
    """Run a ``with`` block with a logger temporarily at ``level``."""
    logger = get_logger(name)
    saved = logger.level
    logger.setLevel(_level_value(level))
    try:
        yield logger
    finally:
        logger.setLevel(saved)
