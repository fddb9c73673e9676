#!/usr/bin/env python3
# menuconsole/ui/__init__.py
from __future__ import annotations
# Re-export convenient top-level API
from .ansi import (
    ANSI,
    CLEAR_LINE,
    CURSOR_UP,
    colorize,
    sequence,
    strip_ansi,
)
from .console import PRINT_MUTEX, is_empty, print_line, write_raw
from .table import format_table
from .logging import (
    ColorizingStreamHandler,
    ConsoleLogHandler,
    PlainFormatter,
    init_logger,
)

__all__ = [
    "ANSI",
    "CLEAR_LINE",
    "CURSOR_UP",
    "colorize",
    "sequence",
    "strip_ansi",
    "PRINT_MUTEX",
    "is_empty",
    "print_line",
    "write_raw",
    "format_table",
    "init_logger",
    "ColorizingStreamHandler",
    "ConsoleLogHandler",
    "PlainFormatter",
]
