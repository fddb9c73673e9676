#!/usr/bin/env python3
# menuconsole/interface/__init__.py
from __future__ import annotations

"""
Package for the interactive line interface.

Provides:
- The shell-word tokenizer used to split input lines.
- Token-aware completion over command trees.
- The default syntax highlighter and its prompt_toolkit lexer.
- Line reader frontends (prompt_toolkit / plain streams).
"""


# Tokenizer FIRST (everything else depends on it)
from .tokenizer import (
    SplitResult,
    State,
    Token,
    TokenizeError,
    UnterminatedDoubleQuoteError,
    UnterminatedError,
    UnterminatedEscapeError,
    UnterminatedSingleQuoteError,
    accept_multiline,
    join,
    split,
    split_line,
)

# Completion / highlighting
from .completion import Completions, ConsoleCompleter, complete_commands
from .highlighter import ConsoleLexer, highlight_line

# Readers (after completion is available)
from .cli import BaseReader, PlainReader, PromptToolkitReader, make_reader

__all__ = [
    # tokenizer
    "SplitResult",
    "State",
    "Token",
    "TokenizeError",
    "UnterminatedError",
    "UnterminatedSingleQuoteError",
    "UnterminatedDoubleQuoteError",
    "UnterminatedEscapeError",
    "accept_multiline",
    "join",
    "split",
    "split_line",
    # completion
    "Completions",
    "ConsoleCompleter",
    "complete_commands",
    # highlighting
    "ConsoleLexer",
    "highlight_line",
    # readers
    "BaseReader",
    "PlainReader",
    "PromptToolkitReader",
    "make_reader",
]
