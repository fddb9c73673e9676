#!/usr/bin/env python3
# menuconsole/ui/logging.py
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

from .ansi import ANSI, strip_ansi
from .console import PRINT_MUTEX

_LEVEL_COLORS = {
    logging.DEBUG: ANSI["bright_black"],
    logging.INFO: "",
    logging.WARNING: ANSI["yellow"],
    logging.ERROR: ANSI["red"],
    logging.CRITICAL: ANSI["magenta"],
}


def _stream_supports_ansi(stream: Any) -> bool:
    try:
        return bool(stream.isatty())
    except (AttributeError, ValueError):
        return False


class ColorizingStreamHandler(logging.StreamHandler):
    """
    StreamHandler coloring records by level when writing to a terminal,
    plain text otherwise.
    """

    def __init__(self, stream=None) -> None:
        super().__init__(stream)
        self._use_ansi = _stream_supports_ansi(self.stream)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            if self._use_ansi:
                color = _LEVEL_COLORS.get(record.levelno, "")
                if color:
                    message = f"{color}{message}{ANSI['reset']}"
            else:
                message = strip_ansi(message)
            with PRINT_MUTEX:
                self.stream.write(message + self.terminator)
                self.flush()
        except Exception:
            self.handleError(record)


class ConsoleLogHandler(logging.Handler):
    """
    Handler emitting records through a console's asynchronous printer.

    Log lines produced by background tasks are printed above the prompt
    while the console is reading, and plainly while a command runs.
    """

    def __init__(self, console: Any, *, transient: bool = False, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.console = console
        self.transient = transient

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            color = _LEVEL_COLORS.get(record.levelno, "")
            if color:
                message = f"{color}{message}{ANSI['reset']}"
            if self.transient:
                self.console.transient_printf(message)
            else:
                self.console.printf(message)
        except Exception:
            self.handleError(record)


class PlainFormatter(logging.Formatter):
    """Formatter that strips ANSI (good for log files)."""

    def format(self, record: logging.LogRecord) -> str:
        record.msg = strip_ansi(str(record.msg))
        return super().format(record)


def init_logger(
    name: str = "menuconsole",
    level: int | str = logging.INFO,
    logfile: Optional[str] = None,
    console: Any = None,
) -> logging.Logger:
    """
    Initialize a color-safe logger.

    Console: ANSI on terminals, plain otherwise; when `console` is given,
    records go through its asynchronous printer instead of stderr.
    File (optional): rotating, plain text, UTF-8.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    if not any(isinstance(h, (ColorizingStreamHandler, ConsoleLogHandler)) for h in logger.handlers):
        if console is not None:
            console_handler: logging.Handler = ConsoleLogHandler(console)
        else:
            console_handler = ColorizingStreamHandler(stream=sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(console_handler)

    if logfile and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        file_handler = RotatingFileHandler(
            logfile, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            PlainFormatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    return logger
