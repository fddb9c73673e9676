#!/usr/bin/env python3
# menuconsole/__init__.py
from __future__ import annotations

"""
menuconsole: closed-loop interactive consoles with menus, history and
cancellable command execution.
"""

from .commands import Command, CommandResult, CommandTree, Commander
from .config import ConsoleConfig, load_config, save_config
from .console import Console, default_error_handler
from .context import Cancelled, Context, DeadlineExceeded
from .errors import (
    CommandInterrupted,
    CommandsError,
    ConsoleBusyError,
    ConsoleError,
    ExecutionError,
    LineHookError,
    ParseError,
    PostRunError,
    PreReadError,
    PreRunError,
)
from .interrupt import CTRL_C, EOF, Interrupt, InterruptKind
from .menu import Menu
from .prompt import Prompt

__version__ = "0.1.0"

__all__ = [
    "Command",
    "CommandResult",
    "CommandTree",
    "Commander",
    "ConsoleConfig",
    "load_config",
    "save_config",
    "Console",
    "default_error_handler",
    "Cancelled",
    "Context",
    "DeadlineExceeded",
    "CommandInterrupted",
    "CommandsError",
    "ConsoleBusyError",
    "ConsoleError",
    "ExecutionError",
    "LineHookError",
    "ParseError",
    "PostRunError",
    "PreReadError",
    "PreRunError",
    "CTRL_C",
    "EOF",
    "Interrupt",
    "InterruptKind",
    "Menu",
    "Prompt",
]
