#!/usr/bin/env python3
# menuconsole/console.py
from __future__ import annotations

"""
The console: menus, command filters, hooks, printing and the read loop.

    console = Console(ConsoleConfig(name="app"))
    console.current_menu().set_commands(make_commands)
    console.start()

Each loop iteration binds the active menu's histories, regenerates its
commands, runs the pre-read hooks and reads a line (continuing unterminated
lines with the secondary prompt). The words then go through the pre-run line
hooks and are executed in the foreground. Errors are reported through
`error_handler` and the loop resumes; it ends on an unhandled EOF or when
the root context is cancelled.
"""

import logging
import sys
import threading
from typing import Any, Callable, Iterable, Optional, Sequence

from . import execute as _execute
from .commands import Commander, CommandTree
from .config import ConsoleConfig
from .context import Context
from .errors import (
    CommandInterrupted,
    CommandsError,
    ConsoleBusyError,
    ConsoleError,
    LineHookError,
    ParseError,
    PreReadError,
)
from .interface import (
    BaseReader,
    Completions,
    ConsoleCompleter,
    ConsoleLexer,
    complete_commands,
    highlight_line,
    make_reader,
    split_line,
)
from .interrupt import CTRL_C, EOF
from .menu import Menu
from .ui import CURSOR_UP, colorize, init_logger, is_empty, print_line, write_raw

logger = logging.getLogger(__name__)

Hook = Callable[[], None]
LineHook = Callable[[list[str]], list[str]]
ErrorHandler = Callable[[BaseException], None]


def default_error_handler(error: BaseException) -> None:
    """Print `[error] <message>` in red to stderr."""
    print_line(colorize(f"[error] {error}", "red"), file=sys.stderr)


class Console:
    """A closed-loop console application with several menus."""

    def __init__(
        self,
        config: Optional[ConsoleConfig] = None,
        *,
        reader: Optional[BaseReader] = None,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        self.config = config or ConsoleConfig()
        self.error_handler: ErrorHandler = error_handler or default_error_handler

        # Guards the active menu, filters and the executing flag
        self._lock = threading.RLock()
        self._executing = False
        self.filters: set[str] = set()

        self.pre_read_hooks: list[Hook] = []
        self.pre_run_line_hooks: list[LineHook] = []
        self.pre_run_hooks: list[Hook] = []
        self.post_run_hooks: list[Hook] = []

        # Replaceable completion and highlighting functions
        self.completer: Callable[[str, int], Completions] = self.complete
        self.highlighter: Callable[[str], str] = self.highlight

        self._reader = reader
        self._print_logo: Optional[Callable[[Console], None]] = None
        self._printed = False

        self.menus: dict[str, Menu] = {}
        default = Menu(self, "")
        default.active = True
        self.menus[""] = default
        self._active = default

    @property
    def name(self) -> str:
        return self.config.name

    # ---------------- Menus ----------------

    def new_menu(self, name: str) -> Menu:
        """
        Create a menu, replacing any menu with the same name.
        Replacing the active menu keeps the new one active.
        """
        with self._lock:
            menu = Menu(self, name)
            previous = self.menus.get(name)
            if previous is not None and previous.active:
                previous.active = False
                menu.active = True
                self._active = menu
            self.menus[name] = menu
            return menu

    def switch_menu(self, name: str) -> None:
        """Make `name` the active menu. No-op if it does not exist or is already active."""
        with self._lock:
            target = self.menus.get(name)
            if target is None or target.active:
                return
            self._active.active = False
            target.active = True
            self._active = target
            self._bind_histories(target)
            self._regenerate(target)
        logger.debug("switched to menu '%s'", name)

    def current_menu(self) -> Menu:
        with self._lock:
            return self._active

    def menu(self, name: str) -> Optional[Menu]:
        """Return the menu called `name`, or None."""
        with self._lock:
            return self.menus.get(name)

    def _bind_histories(self, menu: Menu) -> None:
        if self._reader is not None:
            self._reader.bind_histories(*menu.history_set())

    def _regenerate(self, menu: Menu) -> None:
        try:
            menu.regenerate()
        except Exception as exc:
            error = CommandsError(str(exc) or type(exc).__name__)
            error.__cause__ = exc
            self.error_handler(error)

    # ---------------- Filters ----------------

    def hide_commands(self, *filters: str) -> None:
        """Hide commands tagged with any of `filters` (inherited from enclosing groups)."""
        with self._lock:
            self.filters.update(filters)

    def show_commands(self, *filters: str) -> None:
        """Stop hiding commands for `filters`, or for every filter when none is given."""
        with self._lock:
            if not filters:
                self.filters.clear()
            else:
                self.filters.difference_update(filters)

    def is_hidden(self, tree: Commander, target: Any) -> bool:
        """True if `target` carries a tag currently filtered out."""
        with self._lock:
            filters = set(self.filters)
        if not filters:
            return False
        return bool(set(tree.tags_of(target)) & filters)

    # ---------------- Execution ----------------

    @property
    def is_executing(self) -> bool:
        with self._lock:
            return self._executing

    def _acquire_foreground(self) -> None:
        with self._lock:
            if self._executing:
                raise ConsoleBusyError("a command is already running")
            self._executing = True

    def _release_foreground(self) -> None:
        with self._lock:
            self._executing = False

    def execute(
        self,
        menu: Menu,
        args: Sequence[str],
        async_: bool = False,
        ctx: Optional[Context] = None,
    ) -> Any:
        """Execute `args` with the commands of `menu`; see menuconsole.execute."""
        return _execute.execute(self, menu, args, async_=async_, ctx=ctx)

    def _run_hooks(self, hooks: Iterable[Hook]) -> None:
        for hook in list(hooks):
            hook()

    def run_line_hooks(self, args: list[str]) -> list[str]:
        """Pass `args` through the pre-run line hooks, in registration order."""
        processed = list(args)
        for hook in list(self.pre_run_line_hooks):
            try:
                processed = hook(processed)
            except Exception as exc:
                raise LineHookError(str(exc)) from exc
        return processed

    # ---------------- Printing ----------------

    def printf(self, message: str, *args: Any) -> None:
        """
        Print an asynchronous message (a log, an event) below the prompt.
        While a command runs, the message is printed like regular output.
        """
        text = message % args if args else message
        if self.is_executing:
            print_line(text)
            return
        # Waiting for input: a regular message ends a run of transient ones
        with self._lock:
            self._printed = False
        print_line(text)

    def transient_printf(self, message: str, *args: Any) -> None:
        """
        Like printf(), but consecutive messages printed while the console
        waits for input do not leave blank separators between them.
        """
        text = message % args if args else message
        if self.is_executing:
            print_line(text)
            return

        with self._lock:
            collapse = self._printed and self.config.newline_after
            self._printed = True
        if collapse:
            write_raw(CURSOR_UP)
        print_line(f"{text}\n" if self.config.newline_after else text)

    def set_print_logo(self, func: Callable[[Console], None]) -> None:
        """Set a function printing a banner once, when the loop starts."""
        self._print_logo = func

    def _display_pre_run(self, line: str) -> None:
        if self.config.newline_before:
            if self.config.newline_when_empty or not is_empty(line, self.config.empty_chars):
                print_line()

    def _display_post_run(self, line: str) -> None:
        if self.config.newline_after:
            if self.config.newline_when_empty or not is_empty(line, self.config.empty_chars):
                print_line()
        with self._lock:
            self._printed = False

    # ---------------- Completion / highlighting ----------------

    def complete(self, line: str, cursor: Optional[int] = None) -> Completions:
        """Default completion over the active menu's command tree."""
        tree = self.current_menu().commands()
        if not isinstance(tree, CommandTree):
            return Completions()
        with self._lock:
            filters = set(self.filters)
        return complete_commands(tree, line, cursor, filters=filters)

    def highlight(self, line: str) -> str:
        """Default syntax highlighting of an input line."""
        return highlight_line(
            line,
            is_command=self._is_root_command,
            command_color=self.config.command_highlight,
            flag_color=self.config.flag_highlight,
            quote_color=self.config.quote_highlight,
        )

    def _is_root_command(self, word: str) -> bool:
        tree = self.current_menu().commands()
        target, rest = tree.find([word])
        return not rest and not self.is_hidden(tree, target)

    # ---------------- Read loop ----------------

    @property
    def reader(self) -> BaseReader:
        """The line reader, created for the current terminal on first use."""
        if self._reader is None:
            lexer = None
            if self.config.highlighting:
                lexer = ConsoleLexer(lambda line: self.highlighter(line))
            self._reader = make_reader(
                completer=ConsoleCompleter(lambda line, cursor: self.completer(line, cursor)),
                lexer=lexer,
                complete_while_typing=self.config.complete_while_typing,
                continuation_prompt=lambda: self._secondary_prompt(self.current_menu()),
            )
        return self._reader

    def _secondary_prompt(self, menu: Menu) -> str:
        return menu.prompt.render("secondary") or self.config.multiline_prompt

    def _read_input(self, menu: Menu, reader: BaseReader) -> tuple[str, list[str]]:
        """Read one complete input line. Raises EOFError/KeyboardInterrupt or ParseError."""
        prompt = menu.prompt
        line = reader.read_line(prompt.render("primary"), rprompt=prompt.render("right"))
        result = split_line(line)

        # Open quotes or trailing escapes: keep reading
        while result.incomplete:
            more = reader.read_line(self._secondary_prompt(menu), continuation=True)
            line = f"{line}\n{more}"
            result = split_line(line)

        if prompt.transient is not None:
            shown = self.highlighter(line) if self.config.highlighting else line
            reader.show_transient(prompt.render("transient") + shown, line.count("\n") + 1)

        if not is_empty(line, self.config.empty_chars):
            reader.remember(line)

        if result.error is not None:
            raise ParseError(str(result.error)) from result.error
        return line, result.words

    def start(self, ctx: Optional[Context] = None) -> None:
        """
        Run the read loop until an unhandled EOF or until `ctx` is cancelled.
        SystemExit raised by a command ends the loop and propagates.
        """
        ctx = ctx or Context.background()

        if self.config.log_level or self.config.log_file_path:
            init_logger(
                "menuconsole",
                level=self.config.log_level or logging.INFO,
                logfile=str(self.config.log_file_path) if self.config.log_file_path else None,
                console=self,
            )

        reader = self.reader
        with reader:
            self._bind_histories(self.current_menu())
            if self._print_logo is not None:
                self._print_logo(self)

            while not ctx.done():
                # Always work with the active menu and freshly generated commands
                menu = self.current_menu()
                self._bind_histories(menu)
                self._regenerate(menu)

                try:
                    self._run_hooks(self.pre_read_hooks)
                except Exception as exc:
                    self.error_handler(PreReadError(str(exc)))

                try:
                    line, words = self._read_input(menu, reader)
                except EOFError:
                    if not menu.handle_interrupt(EOF):
                        logger.debug("end of input, leaving the read loop")
                        break
                    continue
                except KeyboardInterrupt:
                    menu.handle_interrupt(CTRL_C)
                    continue
                except ParseError as exc:
                    self.error_handler(exc)
                    continue

                # An interrupt handler or hook may have switched menus while reading
                menu = self.current_menu()
                if ctx.done():
                    break

                self._display_pre_run(line)
                if words:
                    self._run_line(menu, words, ctx)
                self._display_post_run(line)

    run = start

    def _run_line(self, menu: Menu, words: list[str], ctx: Context) -> None:
        try:
            args = self.run_line_hooks(words)
        except LineHookError as exc:
            self.error_handler(exc)
            return
        if not args:
            return

        try:
            self.execute(menu, args, ctx=ctx)
        except CommandInterrupted as exc:
            # Already dispatched to the menu's interrupt handler
            logger.debug("%s", exc)
        except ConsoleError as exc:
            self.error_handler(exc)
