#!/usr/bin/env python3
# menuconsole/errors.py
from __future__ import annotations

"""
Error types raised by the console engine.

Every error surfaced to the console error handler derives from ConsoleError.
The message is rendered with a short prefix naming the stage that failed,
e.g. "Parsing error: unterminated single-quoted string".
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .interrupt import Interrupt


class ConsoleError(Exception):
    """Base class for errors reported through the console error handler."""

    prefix: str = ""

    def __str__(self) -> str:
        message = super().__str__()
        if self.prefix and message:
            return f"{self.prefix}: {message}"
        return message or self.prefix


class PreReadError(ConsoleError):
    """A pre-read hook failed."""
    prefix = "Pre-read error"


class ParseError(ConsoleError):
    """The input line could not be split into words."""
    prefix = "Parsing error"


class CommandsError(ConsoleError):
    """The menu's commands provider failed; the previous command tree stays in use."""
    prefix = "Commands error"


class LineHookError(ConsoleError):
    """A pre-run line hook failed while rewriting the arguments."""
    prefix = "Line error"


class PreRunError(ConsoleError):
    """A pre-run hook failed: the command was not executed."""
    prefix = "Pre-run error"


class PostRunError(ConsoleError):
    """A post-run hook failed after the command completed."""
    prefix = "Post-run error"


class ExecutionError(ConsoleError):
    """The command itself returned an error."""


class ConsoleBusyError(ConsoleError):
    """A foreground command is already running on this console."""
    prefix = "Console busy"


class CommandInterrupted(ConsoleError):
    """The running command was cancelled by an OS signal."""

    prefix = "Command interrupted"

    def __init__(self, interrupt: Interrupt) -> None:
        super().__init__(str(interrupt))
        self.interrupt = interrupt
