#!/usr/bin/env python3
# menuconsole/interface/cli.py
from __future__ import annotations

"""
Interactive input frontends.

Selection order:
    1) prompt_toolkit (rich completion, highlighting, history) on terminals
    2) plain stdin reading otherwise (pipes, files, tests)

Readers raise EOFError on Ctrl-D / end of input and KeyboardInterrupt on
Ctrl-C; the console maps both to interrupt sentinels.
"""

import sys
from typing import Any, Iterable, Optional, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer
from prompt_toolkit.enums import DEFAULT_BUFFER
from prompt_toolkit.filters import has_focus
from prompt_toolkit.formatted_text import ANSI as FormattedANSI
from prompt_toolkit.history import History
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.lexers import Lexer
from prompt_toolkit.patch_stdout import patch_stdout

from menuconsole.history import BoundHistory
from menuconsole.ui import CLEAR_LINE, CURSOR_UP, write_raw

from .tokenizer import accept_multiline


class BaseReader:
    """
    Base interface for line readers.

    Subclasses should implement:
        - setup()
        - read_line()
        - teardown()

    This base also provides context manager support to guarantee teardown,
    and keeps the history set bound by the console.
    """

    def __init__(self) -> None:
        self.history = BoundHistory()
        self._bound: tuple[tuple[str, int], ...] = ()

    def setup(self) -> None:
        ...

    def read_line(self, prompt: str, *, continuation: bool = False, rprompt: str = "") -> str:  # pragma: no cover - interface
        raise NotImplementedError

    def teardown(self) -> None:
        ...

    def bind_histories(self, names: Iterable[str], sources: dict[str, History]) -> bool:
        """Bind the active menu's histories. Returns True if the set changed."""
        names = list(names)
        key = tuple((name, id(sources[name])) for name in names if name in sources)
        if key == self._bound:
            return False
        self._bound = key
        self.history.bind(names, sources)
        return True

    def remember(self, line: str) -> None:
        """Record an accepted line in the bound histories."""
        self.history.append_string(line)

    def show_transient(self, text: str, lines: int = 1) -> None:
        """Replace the last `lines` printed prompt lines with `text`."""
        write_raw((CURSOR_UP + CLEAR_LINE) * lines + "\r" + text + "\n")

    # Context manager helpers
    def __enter__(self) -> "BaseReader":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown()


# ===== Preferred: prompt_toolkit =====
class PromptToolkitReader(BaseReader):
    """Rich line editor with history, live completion and highlighting."""

    def __init__(
        self,
        *,
        completer: Optional[Completer] = None,
        lexer: Optional[Lexer] = None,
        complete_while_typing: bool = True,
        continuation_prompt: Any = None,
        input: Any = None,
        output: Any = None,
    ) -> None:
        super().__init__()
        self._completer = completer
        self._lexer = lexer
        self._complete_while_typing = complete_while_typing
        self._continuation_prompt = continuation_prompt
        self._input = input
        self._output = output
        self._session: Optional[PromptSession] = None

        kb = KeyBindings()

        # Enter accepts complete lines only; open quotes or a trailing
        # backslash continue on the next line.
        @kb.add("enter", filter=has_focus(DEFAULT_BUFFER))
        def _(event):
            b = event.app.current_buffer
            if accept_multiline(b.text):
                b.validate_and_handle()
            else:
                b.insert_text("\n")

        # Key bindings to trigger completion when deleting characters.
        @kb.add("backspace")
        def _(event):
            b = event.app.current_buffer
            if b.read_only():
                return
            if b.selection_state:
                b.cut_selection()
            else:
                b.delete_before_cursor(1)
            # show fresh suggestions after deletion
            if self._complete_while_typing:
                b.start_completion(select_first=False)

        self._key_bindings = kb

    def bind_histories(self, names: Iterable[str], sources: dict[str, History]) -> bool:
        changed = super().bind_histories(names, sources)
        if changed:
            # A session loads its history once; rebuild it over the new set.
            self._session = None
        return changed

    def _get_session(self) -> PromptSession:
        if self._session is None:
            self._session = PromptSession(
                history=self.history,
                completer=self._completer,
                lexer=self._lexer,
                complete_while_typing=self._complete_while_typing,
                key_bindings=self._key_bindings,
                multiline=True,
                prompt_continuation=self._continuation,
                input=self._input,
                output=self._output,
            )
        return self._session

    def _continuation(self, width: int, line_number: int, is_soft_wrap: bool) -> Any:
        if is_soft_wrap or self._continuation_prompt is None:
            return " " * width
        text = self._continuation_prompt() if callable(self._continuation_prompt) else self._continuation_prompt
        return FormattedANSI(text)

    def read_line(self, prompt: str, *, continuation: bool = False, rprompt: str = "") -> str:
        session = self._get_session()
        with patch_stdout(raw=True):
            return session.prompt(
                FormattedANSI(prompt),
                rprompt=FormattedANSI(rprompt) if rprompt else None,
            )

    def remember(self, line: str) -> None:
        # PromptSession already stored the accepted buffer
        return None


# ===== Fallback: plain streams =====
class PlainReader(BaseReader):
    """Line reader over plain text streams, without editing features."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        super().__init__()
        self._stdin = stdin
        self._stdout = stdout

    def read_line(self, prompt: str, *, continuation: bool = False, rprompt: str = "") -> str:
        stdout = self._stdout or sys.stdout
        stdin = self._stdin or sys.stdin
        write_raw(prompt, file=stdout)
        line = stdin.readline()
        if not line:
            raise EOFError
        return line.rstrip("\n")

    def show_transient(self, text: str, lines: int = 1) -> None:
        # No cursor control over plain streams
        return None


def make_reader(
    *,
    completer: Optional[Completer] = None,
    lexer: Optional[Lexer] = None,
    complete_while_typing: bool = True,
    continuation_prompt: Any = None,
) -> BaseReader:
    """
    Factory to select the best CLI frontend for the current stdin.
    """
    if sys.stdin is not None and sys.stdin.isatty():
        return PromptToolkitReader(
            completer=completer,
            lexer=lexer,
            complete_while_typing=complete_while_typing,
            continuation_prompt=continuation_prompt,
        )
    return PlainReader()
