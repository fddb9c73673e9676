#!/usr/bin/env python3
# menuconsole/commands/__init__.py
from __future__ import annotations

"""
Package for command trees.

Provides:
- Data structures and protocols (`Command`, `CommandResult`, `CommandCallback`, `Commander`).
- A concrete command tree with decorator registration (`CommandTree`).
- Argument binding and usage rendering (`bind_args`, `build_usage`).
- The built-in help command and help formatting.

This package re-exports public APIs from:
- command_types.py
- commands.py
- parser.py
- help.py
"""


# Re-export from submodules
from .command_types import Command, CommandCallback, CommandResult, Commander
from .commands import (
    CommandFailedError,
    CommandNotFoundError,
    CommandTree,
    CommandUsageError,
    usage_of,
)
from .parser import CONTEXT_PARAM, bind_args, build_usage
from .help import HELP_TEXT, add_help_command, format_command_help, format_commands_table

__all__ = [
    "Command",
    "CommandCallback",
    "CommandResult",
    "Commander",
    "CommandTree",
    "CommandFailedError",
    "CommandNotFoundError",
    "CommandUsageError",
    "usage_of",
    "CONTEXT_PARAM",
    "bind_args",
    "build_usage",
    "HELP_TEXT",
    "add_help_command",
    "format_command_help",
    "format_commands_table",
]
