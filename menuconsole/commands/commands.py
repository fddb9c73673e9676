#!/usr/bin/env python3
# menuconsole/commands/commands.py
from __future__ import annotations

"""
Command tree and decorator utilities.

This module provides:
- CommandTree: a tree of commands with aliases, groups and filter tags,
  implementing the Commander protocol used by console menus.
- Errors raised while resolving or running a command line.

A menu regenerates its tree on every read loop iteration, so trees are built
by a provider function rather than held in a global registry:

    def commands() -> CommandTree:
        tree = CommandTree()

        @tree.command(description="Say hello.", tags={"net"})
        def hello(name: str = "world") -> str:
            return f"hello {name}"

        return tree
"""

import difflib
import inspect
import logging
from typing import Any, Callable, Iterable, Mapping, Optional, TextIO

from menuconsole.ui import print_line

from .command_types import Command, CommandResult
from .parser import CONTEXT_PARAM, bind_args, build_usage

logger = logging.getLogger(__name__)


class CommandNotFoundError(LookupError):
    """No command matches the first word of the line."""

    def __init__(self, name: str, suggestions: Iterable[str] = ()) -> None:
        hint = f" Did you mean: {', '.join(suggestions)}?" if suggestions else ""
        super().__init__(f"Unknown command: {name}.{hint}" if name else "No command given.")
        self.name = name


class CommandUsageError(ValueError):
    """The arguments do not fit the command signature, or a group was run."""

    def __init__(self, message: str, usage: str = "") -> None:
        super().__init__(f"{message}\nUsage: {usage}" if usage else message)
        self.usage = usage


class CommandFailedError(RuntimeError):
    """The command returned a CommandResult with ok=False."""

    def __init__(self, result: CommandResult) -> None:
        super().__init__(str(result))
        self.result = result


class CommandTree:
    """Holds a root command and resolves/executes command lines against it."""

    def __init__(self, name: str = "", description: str = "", *, out: TextIO | None = None) -> None:
        self.root = Command(name=name, description=description)
        # Stream receiving command results; None means sys.stdout at print time.
        self.out = out

    # ---------------- Registration ----------------

    def add_command(self, command_obj: Command, *, parent: str | Command | None = None) -> Command:
        """Attach a pre-built Command under `parent` (a path like 'net scan', or a Command)."""
        return self._resolve_parent(parent).add_command(command_obj)

    def group(
        self,
        name: str,
        *,
        description: str = "",
        aliases: list[str] | None = None,
        tags: Iterable[str] = (),
        parent: str | Command | None = None,
    ) -> Command:
        """Create a command group, holding subcommands but no callback of its own."""
        node = Command(
            name=name,
            description=description,
            aliases=aliases or [],
            tags=frozenset(tags),
        )
        return self.add_command(node, parent=parent)

    def command(
        self,
        *,
        name: str | None = None,
        description: str | None = None,
        example: str | None = None,
        aliases: list[str] | None = None,
        tags: Iterable[str] = (),
        completers: Mapping[str, Callable[..., Iterable[str]]] | None = None,
        parent: str | Command | None = None,
        pre_run: Callable[[], None] | None = None,
        post_run: Callable[[], None] | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """
        Decorator to register a function as a command with metadata.

        - Function name is transformed from snake_case to kebab-case for `name` if not provided.
        - `param_names` is captured from the function signature for completion use.
        """

        def wrapper(func: Callable[..., Any]) -> Callable[..., Any]:
            signature = inspect.signature(func)
            param_names = [p.name for p in signature.parameters.values()
                           if p.name != CONTEXT_PARAM]

            command_obj = Command(
                name=name or func.__name__.replace("_", "-"),
                description=(description or inspect.getdoc(func) or "").strip(),
                example=example or "",
                callback=func,
                aliases=aliases or [],
                tags=frozenset(tags),
                completers=completers or {},
                param_names=param_names,
                pre_run=pre_run,
                post_run=post_run,
            )
            self.add_command(command_obj, parent=parent)
            return func

        return wrapper

    def _resolve_parent(self, parent: str | Command | None) -> Command:
        if parent is None:
            return self.root
        if isinstance(parent, Command):
            return parent
        node, remaining = self.find(parent.split())
        if remaining:
            raise ValueError(f"No command group named '{parent}'.")
        return node

    # ---------------- Lookup ----------------

    def find(self, words: list[str]) -> tuple[Command, list[str]]:
        """
        Resolve the deepest command matching the leading words.

        Returns the command and the words left after it. When nothing
        matches, the root is returned with all the words.
        """
        node = self.root
        index = 0
        while index < len(words):
            child = node.get(words[index])
            if child is None:
                break
            node = child
            index += 1
        return node, list(words[index:])

    def tags_of(self, target: Command) -> frozenset[str]:
        """Tags applying to `target`: its own and those of its enclosing groups."""
        tags: set[str] = set()
        for node in target.lineage():
            tags.update(node.tags)
        return frozenset(tags)

    def commands(self) -> list[Command]:
        """Top-level commands."""
        return self.root.commands()

    def names(self) -> list[str]:
        """Top-level names and aliases."""
        return self.root.names()

    def suggest(self, name: str, node: Command | None = None) -> list[str]:
        """Return close matches for a misspelled command name."""
        universe = (node or self.root).names()
        return difflib.get_close_matches(name.lower(), universe, n=3, cutoff=0.6)

    # ---------------- Execution ----------------

    def execute(self, args: list[str], *, ctx: Any = None) -> Any:
        """
        Run the command designated by `args`.

        The result is printed unless it is None; a CommandResult with
        ok=False raises CommandFailedError.
        """
        target, remaining = self.find(args)

        if target is self.root:
            name = args[0] if args else ""
            raise CommandNotFoundError(name, self.suggest(name) if name else ())

        if target.callback is None:
            subcommands = ", ".join(sorted(c.name for c in target.commands()))
            if remaining:
                hint = self.suggest(remaining[0], target)
                raise CommandNotFoundError(
                    f"{target.path} {remaining[0]}", hint)
            raise CommandUsageError(
                f"'{target.path}' requires a subcommand: {subcommands or '(none)'}")

        try:
            positional_args, keyword_args = bind_args(target.callback, remaining, ctx=ctx)
        except TypeError as exc:
            raise CommandUsageError(
                str(exc), build_usage(target.path, target.callback)) from exc

        logger.debug("running command '%s' with %d argument(s)", target.path, len(remaining))

        if target.pre_run is not None:
            target.pre_run()
        result = target.invoke(*positional_args, **keyword_args)
        if target.post_run is not None:
            target.post_run()

        if isinstance(result, CommandResult):
            if not result.ok:
                raise CommandFailedError(result)
            if result.message:
                print_line(str(result), file=self.out)
        elif result is not None:
            print_line(str(result), file=self.out)
        return result


def usage_of(command_obj: Command) -> Optional[str]:
    """Usage line for a command with a callback, None for groups."""
    if command_obj.callback is None:
        return None
    return build_usage(command_obj.path, command_obj.callback)
