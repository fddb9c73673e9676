#!/usr/bin/env python3
# menuconsole/commands/help.py
from __future__ import annotations

"""
Help formatting and the built-in `help` command.

    help              list the visible top-level commands
    help net scan     show details for one command or group
"""

from typing import Callable, Optional

from menuconsole.ui import format_table

from .command_types import Command
from .commands import CommandTree, usage_of

# Short hint shown under command listings
HELP_TEXT = "Type 'help <command>' for more information on a specific command."


def format_commands_table(
    node: Command,
    is_hidden: Optional[Callable[[Command], bool]] = None,
) -> str:
    """Render the subcommands of `node` as a table, skipping hidden ones."""
    rows = []
    for command_obj in sorted(node.commands(), key=lambda x: x.name.lower()):
        if is_hidden is not None and is_hidden(command_obj):
            continue
        alias_display = ", ".join(command_obj.aliases) if command_obj.aliases else "-"
        rows.append([command_obj.name, alias_display, command_obj.description])
    if not rows:
        return "No commands available."
    return format_table(rows, headers=["Command", "Aliases", "Description"])


def format_command_help(command_obj: Command, is_hidden: Optional[Callable[[Command], bool]] = None) -> str:
    """Render details for one command; groups also list their subcommands."""
    alias_text = ", ".join(command_obj.aliases) if command_obj.aliases else "(none)"
    lines = [
        f"Name:        {command_obj.path}",
        f"Aliases:     {alias_text}",
        f"Description: {command_obj.description or '(none)'}",
    ]
    if command_obj.tags:
        lines.append(f"Tags:        {', '.join(sorted(command_obj.tags))}")
    if command_obj.callback is not None:
        lines.append(f"Example:     {command_obj.example or '(none)'}")
        lines.append(f"Usage:       {usage_of(command_obj)}")
    if command_obj.commands():
        lines.append("")
        lines.append(format_commands_table(command_obj, is_hidden))
    return "\n".join(lines)


def add_help_command(
    tree: CommandTree,
    *,
    is_hidden: Optional[Callable[[Command], bool]] = None,
) -> Command:
    """Register `help [command...]` on `tree`."""

    def help_(*words: str) -> str:
        if not words:
            return f"{format_commands_table(tree.root, is_hidden)}\n\n{HELP_TEXT}"
        target, remaining = tree.find(list(words))
        if target is tree.root or remaining or (is_hidden is not None and is_hidden(target)):
            return f"No such command: {' '.join(words)}"
        return format_command_help(target, is_hidden)

    tree.command(
        name="help",
        description="Show available commands or help for one command.",
        example="help net scan",
        aliases=["?"],
        completers={"pos*": lambda text, argv, index: [
            n for n in tree.names() if n.startswith(text)]},
    )(help_)
    return tree.root.get("help")  # type: ignore[return-value]
