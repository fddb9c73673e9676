#!/usr/bin/env python3
# menuconsole/interface/highlighter.py
from __future__ import annotations

"""
Default syntax highlighter.

Root command words are colored with the command color, flags (words starting
with '-') with the flag color, and quoted text with the quote color. The line
is re-emitted with its original spacing so the cursor stays aligned.
"""

from typing import Any, Callable, Optional

from prompt_toolkit.formatted_text import ANSI as FormattedANSI
from prompt_toolkit.formatted_text import to_formatted_text
from prompt_toolkit.formatted_text.utils import split_lines
from prompt_toolkit.lexers import Lexer

from menuconsole.ui import ANSI, strip_ansi

from .tokenizer import split_line


def highlight_line(
    line: str,
    *,
    is_command: Optional[Callable[[str], bool]] = None,
    command_color: str = ANSI["green"],
    flag_color: str = ANSI["grey"],
    quote_color: str = ANSI["yellow"],
) -> str:
    """Return `line` with ANSI color sequences inserted."""
    if not line:
        return line

    result = split_line(line, highlight=True, quote_color=quote_color)
    reset = ANSI["fg_reset"]
    colored: list[str] = []
    first_word = True

    for word in result.words:
        bare = strip_ansi(word).strip()
        if not bare:
            colored.append(word)
            continue
        if first_word:
            first_word = False
            if is_command is not None and is_command(bare):
                colored.append(f"{command_color}{word}{reset}")
                continue
        if bare.startswith("-"):
            colored.append(f"{flag_color}{word}{reset}")
        else:
            colored.append(word)

    return "".join(colored) + result.remainder


class ConsoleLexer(Lexer):
    """prompt_toolkit lexer rendering a `line -> ANSI line` highlighter."""

    def __init__(self, highlight: Callable[[str], str]) -> None:
        self._highlight = highlight

    def lex_document(self, document: Any) -> Callable[[int], Any]:
        fragments = to_formatted_text(FormattedANSI(self._highlight(document.text)))
        lines = list(split_lines(fragments))

        def get_line(lineno: int) -> Any:
            try:
                return lines[lineno]
            except IndexError:
                return []

        return get_line
