"""Logging setup for programs built on ``hypercube``.

Package modules only create loggers under the ``hypercube`` namespace; nothing
is printed until a program calls `setup_logging`.
"""

from __future__ import annotations

import logging
from pathlib import Path
import sys
from typing import TextIO

LOGGER_NAME: str = "hypercube"
LOG_FORMAT: str = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT: str = "%H:%M:%S"

# handlers installed here carry names with this prefix
_HANDLER_PREFIX = "hypercube."


def setup_logging(
    level: int | str = logging.INFO,
    log_file: str | Path | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Send ``hypercube`` log records to `stream` and, optionally, `log_file`.

    Calling this again replaces the handlers of the previous call, so the
    level or destination can change without duplicated output.  Handlers
    added by anyone else are left alone.

    Args:
        level: Level name or number, e.g. ``"DEBUG"`` or ``logging.INFO``.
        log_file: Path of a log file to write, truncated first.
        stream: Console stream; stdout if not given.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if (handler.get_name() or "").startswith(_HANDLER_PREFIX):
            logger.removeHandler(handler)
            handler.close()

    handlers: dict[str, logging.Handler] = {"console": logging.StreamHandler(stream or sys.stdout)}
    if log_file is not None:
        handlers["file"] = logging.FileHandler(log_file, mode="w", encoding="utf-8")

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for name, handler in handlers.items():
        handler.set_name(_HANDLER_PREFIX + name)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("logging to %s", ", ".join(handlers))
    return logger
