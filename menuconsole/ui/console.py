#!/usr/bin/env python3
# menuconsole/ui/console.py
from __future__ import annotations

import sys
import threading
from typing import TextIO

# Single shared print mutex for all console output (logs, async messages, results).
PRINT_MUTEX = threading.Lock()


def print_line(text: str = "", *, file: TextIO | None = None, flush: bool = True) -> None:
    """Thread-safe single-line print that cooperates with async loggers."""
    stream = file or sys.stdout
    with PRINT_MUTEX:
        stream.write(f"{text}\n")
        if flush:
            stream.flush()


def write_raw(text: str, *, file: TextIO | None = None) -> None:
    """Write `text` as-is (no newline), e.g. cursor movement sequences."""
    stream = file or sys.stdout
    with PRINT_MUTEX:
        stream.write(text)
        stream.flush()


def is_empty(line: str, empty_chars: str = " \t") -> bool:
    """Return True if `line` is made only of characters from `empty_chars`."""
    return all(char in empty_chars for char in line)
