#!/usr/bin/env python3
# menuconsole/commands/command_types.py
from __future__ import annotations

"""
Command data structures and protocols.

This module defines:
- CommandCallback: the callable protocol for any command implementation.
- CommandResult: a normalized result container for command outputs.
- Command: a node of a command tree, with metadata, tags and a callable.
- Commander: the capability a menu's command tree must provide to the console.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Protocol, runtime_checkable


class CommandCallback(Protocol):
    """Protocol for any command function."""

    def __call__(self, *args: Any, **kwargs: Any) -> Any:  # pragma: no cover - signature only
        ...


@runtime_checkable
class Commander(Protocol):
    """
    What the console needs from a command tree.

    find() resolves the deepest command matching the leading words,
    execute() runs the command line, tags_of() returns the filter tags that
    apply to a command found by find().
    """

    def find(self, words: list[str]) -> tuple[Any, list[str]]:  # pragma: no cover - interface
        ...

    def execute(self, args: list[str], *, ctx: Any = None) -> Any:  # pragma: no cover - interface
        ...

    def tags_of(self, target: Any) -> Iterable[str]:  # pragma: no cover - interface
        ...


@dataclass(slots=True)
class CommandResult:
    """
    Normalized result container from command execution.

    Attributes:
        ok: True if the command completed successfully.
        message: Human-readable summary or primary output.
        data: Optional machine-readable payload (dict/list/primitive).
    """
    ok: bool = True
    message: str = ""
    data: Any = None

    def __str__(self) -> str:
        # Keep CLI printing predictable
        return self.message if self.message else ("ok" if self.ok else "error")


@dataclass(slots=True, eq=False)
class Command:
    """
    A command, or a group of subcommands, in a command tree.

    Important fields:
        name: Primary command name, unique among its siblings.
        description: Short, user-facing description.
        example: One-line example usage string (optional).
        callback: Function implementing the command; None for pure groups.
        aliases: Extra names resolving to the same command.
        tags: Filter labels; the console hides commands whose tags it filters.
        completers: Mapping for completions (positional 'posN'/'pos*' and key=value).
        param_names: All parameter names discovered from the callback signature.
        pre_run / post_run: Optional callables run around the callback.
    """

    name: str
    callback: Optional[CommandCallback] = None
    description: str = ""
    example: str = ""
    aliases: list[str] = field(default_factory=list)
    tags: frozenset[str] = frozenset()
    completers: Mapping[str, Callable[..., Iterable[str]]] = field(default_factory=dict)
    param_names: list[str] = field(default_factory=list)
    pre_run: Optional[Callable[[], None]] = None
    post_run: Optional[Callable[[], None]] = None
    parent: Optional["Command"] = field(default=None, repr=False)
    _children: dict[str, "Command"] = field(default_factory=dict, repr=False)
    _alias_to_primary: dict[str, str] = field(default_factory=dict, repr=False)

    # ---------------- Tree structure ----------------

    def add_command(self, command_obj: "Command") -> "Command":
        """Attach a subcommand and its aliases, ensuring no collisions."""
        primary_key = command_obj.name.lower()

        if primary_key in self._children or primary_key in self._alias_to_primary:
            raise ValueError(
                f"Command '{command_obj.name}' already registered under '{self.path or '<root>'}'.")

        for alias in command_obj.aliases:
            alias_key = alias.lower()
            if alias_key in self._children or alias_key in self._alias_to_primary:
                raise ValueError(
                    f"Alias '{alias}' for '{command_obj.name}' collides with an existing name."
                )

        self._children[primary_key] = command_obj
        for alias in command_obj.aliases:
            self._alias_to_primary[alias.lower()] = primary_key
        command_obj.parent = self
        return command_obj

    def get(self, name: str) -> Optional["Command"]:
        """Return the subcommand by primary name or alias, or None if not found."""
        key = name.lower()
        if key in self._children:
            return self._children[key]
        if key in self._alias_to_primary:
            return self._children[self._alias_to_primary[key]]
        return None

    def commands(self) -> list["Command"]:
        """Return direct subcommands (primary entries only)."""
        return list(self._children.values())

    def names(self) -> list[str]:
        """Return all subcommand names and aliases, for completion."""
        return [*self._children.keys(), *self._alias_to_primary.keys()]

    @property
    def path(self) -> str:
        """Full space-separated command path from the root."""
        parts = []
        node: Optional[Command] = self
        while node is not None and node.parent is not None:
            parts.append(node.name)
            node = node.parent
        return " ".join(reversed(parts))

    def lineage(self) -> list["Command"]:
        """This command followed by its ancestors, up to the root."""
        nodes = []
        node: Optional[Command] = self
        while node is not None:
            nodes.append(node)
            node = node.parent
        return nodes

    def invoke(self, *args: Any, **kwargs: Any) -> Any:
        """Execute the underlying command callback with provided arguments."""
        if self.callback is None:
            raise TypeError(f"'{self.path}' is a command group and cannot be invoked.")
        return self.callback(*args, **kwargs)
