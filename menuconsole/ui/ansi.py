#!/usr/bin/env python3
# menuconsole/ui/ansi.py
from __future__ import annotations

import re

# ---- Core SGR maps ----------------------------------------------------------

# Foreground: 30-37, Bright Foreground: 90-97
ANSI = {
    # reset
    "reset": "\x1b[0m",
    "fg_reset": "\x1b[39m",

    # styles
    "bold": "\x1b[1m",
    "dim": "\x1b[2m",
    "italic": "\x1b[3m",
    "underline": "\x1b[4m",
    "reverse": "\x1b[7m",

    # fg 8-color
    "black": "\x1b[30m",
    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "magenta": "\x1b[35m",
    "cyan": "\x1b[36m",
    "white": "\x1b[37m",

    # fg bright 8-color
    "bright_black": "\x1b[90m",
    "bright_red": "\x1b[91m",
    "bright_green": "\x1b[92m",
    "bright_yellow": "\x1b[93m",
    "bright_blue": "\x1b[94m",
    "bright_magenta": "\x1b[95m",
    "bright_cyan": "\x1b[96m",
    "bright_white": "\x1b[97m",

    # grey used for flags by the default highlighter
    "grey": "\x1b[38;05;244m",
}

# Cursor movement used by transient printing.
CURSOR_UP = "\x1b[1A"
CLEAR_LINE = "\x1b[2K"

ANSI_REGEX = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


def strip_ansi(text: str) -> str:
    """Remove SGR and cursor escape sequences from `text`."""
    return ANSI_REGEX.sub("", text)


def sequence(color: str) -> str:
    """
    Resolve a color to its escape sequence.

    Accepts a name from the ANSI table ('green', 'bright_white') or a raw
    sequence starting with ESC, which is returned unchanged.
    """
    if color.startswith("\x1b"):
        return color
    try:
        return ANSI[color]
    except KeyError:
        raise ValueError(f"Unknown color name: {color!r}") from None


def colorize(text: str, color: str, *, reset: str = "reset") -> str:
    """Wrap `text` in the given color and a trailing reset sequence."""
    return f"{sequence(color)}{text}{ANSI[reset]}"
