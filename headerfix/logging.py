"""Logging utilities for headerfix commands."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

_LOGGER_NAME = "headerfix"

_progress_pending = threading.Event()


def note_progress_line(pending: bool = True) -> None:
    """Record whether the terminal cursor sits at the end of a \\r progress line."""
    if pending:
        _progress_pending.set()
    else:
        _progress_pending.clear()


class ConsoleHandler(logging.StreamHandler):
    """Stream handler that moves past an unfinished progress line before each record."""

    def emit(self, record: logging.LogRecord) -> None:
        if _progress_pending.is_set():
            _progress_pending.clear()
            try:
                self.stream.write("\n")
            except Exception:
                self.handleError(record)
                return
        super().emit(record)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the headerfix hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the headerfix logger with console output and an optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations in one process do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = ConsoleHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[headerfix] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["ConsoleHandler", "configure_logging", "get_logger", "note_progress_line"]
