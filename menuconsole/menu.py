#!/usr/bin/env python3
# menuconsole/menu.py
from __future__ import annotations

"""
Menus: named command contexts of a console.

A menu owns a commands provider (called again on every read loop iteration,
so the tree always reflects current application state), a set of named
history sources, interrupt handlers and a prompt. Exactly one menu of a
console is active at a time.
"""

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence

from prompt_toolkit.history import FileHistory, History

from .commands import Commander, CommandTree
from .context import Context
from .errors import ParseError
from .history import default_history, default_history_name
from .interface.tokenizer import TokenizeError, split
from .interrupt import Interrupt, InterruptHandler
from .prompt import default_prompt

if TYPE_CHECKING:
    from .console import Console

logger = logging.getLogger(__name__)

CommandsProvider = Callable[[], Commander]


class Menu:
    """A command context: commands, histories, interrupt handlers and prompt."""

    def __init__(self, console: Console, name: str = "") -> None:
        self.name = name
        self.console = console
        self.active = False
        self.prompt = default_prompt(console.config.name, name)

        self._lock = threading.RLock()
        self._provider: Optional[CommandsProvider] = None
        self._commands: Optional[Commander] = None

        default_name = default_history_name(name)
        self.histories: dict[str, History] = {default_name: default_history()}
        self.history_names: list[str] = [default_name]
        self.interrupts: dict[Interrupt, InterruptHandler] = {}

    def __repr__(self) -> str:
        return f"Menu(name={self.name!r}, active={self.active})"

    # ---------------- Commands ----------------

    def set_commands(self, provider: CommandsProvider) -> None:
        """Set the function producing this menu's command tree."""
        with self._lock:
            self._provider = provider
            self._commands = None

    def regenerate(self) -> Commander:
        """
        Build a fresh command tree from the provider.
        If the provider raises, the previous tree (or an empty one) is kept
        and the error propagates.
        """
        with self._lock:
            if self._provider is None:
                self._commands = CommandTree(self.name)
                return self._commands
            try:
                commands = self._provider()
            except Exception:
                if self._commands is None:
                    self._commands = CommandTree(self.name)
                raise
            self._commands = commands
            return commands

    def commands(self) -> Commander:
        """The current command tree, generated on first use."""
        with self._lock:
            if self._commands is None:
                return self.regenerate()
            return self._commands

    # ---------------- Histories ----------------

    def add_history_source(self, name: str, source: History) -> None:
        """
        Add (or replace) a named history source.
        Takes effect on the next menu switch or loop iteration.
        """
        with self._lock:
            if name not in self.histories:
                self.history_names.append(name)
            self.histories[name] = source

    def add_history_source_file(self, name: str, path: str | Path) -> History:
        """Add a history source persisted to `path` (created on first write)."""
        filepath = Path(path).expanduser()
        filepath.parent.mkdir(parents=True, exist_ok=True)
        source = FileHistory(str(filepath))
        self.add_history_source(name, source)
        return source

    def delete_history_source(self, name: str) -> None:
        """Remove a history source; unknown names are ignored."""
        with self._lock:
            if self.histories.pop(name, None) is not None:
                self.history_names.remove(name)

    def history_set(self) -> tuple[list[str], dict[str, History]]:
        """Snapshot of (ordered names, sources) for binding to the reader."""
        with self._lock:
            return list(self.history_names), dict(self.histories)

    # ---------------- Interrupts ----------------

    def add_interrupt(self, interrupt: Interrupt, handler: InterruptHandler) -> None:
        """Register `handler(console)` for an interrupt sentinel."""
        with self._lock:
            self.interrupts[interrupt] = handler

    def del_interrupt(self, *interrupts: Interrupt) -> None:
        """Remove handlers for the given sentinels, or all of them when none is given."""
        with self._lock:
            if not interrupts:
                self.interrupts.clear()
                return
            for interrupt in interrupts:
                self.interrupts.pop(interrupt, None)

    def handle_interrupt(self, interrupt: Interrupt) -> bool:
        """Run the handler for `interrupt`. Returns False if none is registered."""
        with self._lock:
            handler = self.interrupts.get(interrupt)
        if handler is None:
            return False
        logger.debug("menu '%s' handling interrupt %s", self.name, interrupt)
        handler(self.console)
        return True

    # ---------------- Running commands ----------------

    def run_command_args(self, args: Sequence[str], ctx: Optional[Context] = None) -> Any:
        """
        Execute a command from its words.

        When called while another command runs (e.g. from inside a command),
        the call does not claim the console's foreground slot.
        """
        return self.console.execute(self, args, async_=self.console.is_executing, ctx=ctx)

    def run_command_line(self, line: str, ctx: Optional[Context] = None) -> Any:
        """Split `line` into shell words and execute them."""
        if not line:
            return None
        try:
            args = split(line)
        except TokenizeError as exc:
            raise ParseError(str(exc)) from exc
        return self.run_command_args(args, ctx)
