"""Logging setup for fatal errors, warnings and debug information."""

from __future__ import annotations

import logging
import sys

_ROOT_NAME = "comicsticks"
_FORMAT = "%(asctime)s.%(msecs)03d %(filename)s:%(lineno)d: %(message)s"
_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"


class _StderrHandler(logging.StreamHandler):
    """Stream handler that always writes to the current ``sys.stderr``."""

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr
        super().emit(record)


_handler: _StderrHandler | None = None


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or a child of it called ``name``."""
    if not name:
        return logging.getLogger(_ROOT_NAME)
    return logging.getLogger(f"{_ROOT_NAME}.{name}")


def init(debug: bool = False) -> None:
    """Configure the package logger; debug messages are shown only if ``debug``."""
    global _handler
    logger = get_logger()
    if _handler is None:
        _handler = _StderrHandler()
        _handler.setFormatter(logging.Formatter(_FORMAT, _DATE_FORMAT))
        logger.addHandler(_handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)


def debug_enabled() -> bool:
    """Report whether debug messages are currently emitted."""
    return get_logger().isEnabledFor(logging.DEBUG)