#!/usr/bin/env python3
# menuconsole/interface/tokenizer.py
from __future__ import annotations

"""
Shell-word tokenizer.

Splits an input line into words the way a POSIX shell would (quotes and
backslash escapes, no expansion), and reports unterminated quotes or escapes
so that callers can keep reading lines before executing.

In highlight mode, whitespace and quote characters are kept in the words
(quotes wrapped in a color sequence) so that joining the words reproduces
the line with colors inserted and alignment intact.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional

from menuconsole.ui import ANSI

SPLIT_CHARS = " \n\t"
SINGLE_QUOTE = "'"
DOUBLE_QUOTE = '"'
ESCAPE_CHAR = "\\"
DOUBLE_ESCAPE_CHARS = "$`\"\n\\"


class State(enum.Enum):
    RAW = "raw"
    SINGLE_QUOTE = "single-quote"
    DOUBLE_QUOTE = "double-quote"
    ESCAPE = "escape"


class TokenizeError(ValueError):
    """The line could not be split. Carries the words split so far."""

    default_message = "malformed input line"

    def __init__(self, message: Optional[str] = None, *, words: Optional[list[str]] = None, remainder: str = "") -> None:
        super().__init__(message or self.default_message)
        self.words = words or []
        self.remainder = remainder


class UnterminatedError(TokenizeError):
    """The line is incomplete: more input may complete it."""


class UnterminatedSingleQuoteError(UnterminatedError):
    default_message = "unterminated single-quoted string"


class UnterminatedDoubleQuoteError(UnterminatedError):
    default_message = "unterminated double-quoted string"


class UnterminatedEscapeError(UnterminatedError):
    default_message = "unterminated backslash-escape"


@dataclass(frozen=True, slots=True)
class Token:
    """A word and the quote state that opened it (RAW when unquoted)."""
    text: str
    state: State = State.RAW


@dataclass(slots=True)
class SplitResult:
    words: list[str] = field(default_factory=list)
    tokens: list[Token] = field(default_factory=list)
    remainder: str = ""
    error: Optional[TokenizeError] = None

    @property
    def incomplete(self) -> bool:
        return isinstance(self.error, UnterminatedError)


def split_line(line: str, *, highlight: bool = False, quote_color: str = ANSI["yellow"]) -> SplitResult:
    """
    Split `line` into words without raising.

    On failure, `error` is set and `remainder` holds the unconsumed part of
    the line (in highlight mode, the colored reconstruction of it).
    """
    words: list[str] = []
    tokens: list[Token] = []
    pos, length = 0, len(line)

    while pos < length:
        char = line[pos]
        continuation = char == ESCAPE_CHAR and line[pos + 1:pos + 2] == "\n"

        if char in SPLIT_CHARS or continuation:
            skipped = line[pos:pos + 2] if continuation else char
            pos += len(skipped)
            if highlight:
                if words:
                    words[-1] += skipped
                    tokens[-1] = Token(words[-1], tokens[-1].state)
                else:
                    words.append(skipped)
                    tokens.append(Token(skipped))
            continue

        word, state, pos, error, remainder = _split_word(line, pos, highlight, quote_color)
        if error is not None:
            error.words = list(words)
            error.remainder = remainder
            return SplitResult(words, tokens, remainder, error)
        words.append(word)
        tokens.append(Token(word, state))

    return SplitResult(words, tokens)


def _split_word(line: str, pos: int, highlight: bool, quote_color: str):
    """Consume one word starting at `pos`. Returns (word, state, pos, error, remainder)."""
    reset = ANSI["fg_reset"]
    start = pos
    length = len(line)
    buf: list[str] = []
    state = State.RAW
    opened: Optional[State] = None
    quote_buf, quote_pos = 0, pos

    def quote_remainder(quote: str) -> str:
        if highlight:
            return "".join(buf[:quote_buf]) + quote_color + quote + line[quote_pos:]
        return line[start:]

    while True:
        if state is State.RAW:
            if pos >= length:
                return "".join(buf), opened or State.RAW, pos, None, ""
            char = line[pos]
            pos += 1
            if char in (SINGLE_QUOTE, DOUBLE_QUOTE):
                state = State.SINGLE_QUOTE if char == SINGLE_QUOTE else State.DOUBLE_QUOTE
                opened = opened or state
                quote_buf, quote_pos = len(buf), pos
                if highlight:
                    buf.append(quote_color + char)
            elif char == ESCAPE_CHAR:
                if highlight:
                    buf.append(char)
                state = State.ESCAPE
            elif char in SPLIT_CHARS:
                if highlight:
                    buf.append(char)
                return "".join(buf), opened or State.RAW, pos, None, ""
            else:
                buf.append(char)

        elif state is State.ESCAPE:
            if pos >= length:
                remainder = "".join(buf) if highlight else line[start:]
                return "", State.ESCAPE, pos, UnterminatedEscapeError(), remainder
            char = line[pos]
            pos += 1
            # an escaped newline is a line continuation
            if char != "\n" or highlight:
                buf.append(char)
            state = State.RAW

        elif state is State.SINGLE_QUOTE:
            end = line.find(SINGLE_QUOTE, pos)
            if end == -1:
                return "", state, length, UnterminatedSingleQuoteError(), quote_remainder(SINGLE_QUOTE)
            buf.append(line[pos:end])
            if highlight:
                buf.append(SINGLE_QUOTE + reset)
            pos = end + 1
            state = State.RAW

        else:
            if pos >= length:
                return "", state, length, UnterminatedDoubleQuoteError(), quote_remainder(DOUBLE_QUOTE)
            char = line[pos]
            pos += 1
            if char == DOUBLE_QUOTE:
                if highlight:
                    buf.append(char + reset)
                state = State.RAW
            elif char == ESCAPE_CHAR and pos < length and line[pos] in DOUBLE_ESCAPE_CHARS:
                escaped = line[pos]
                pos += 1
                if highlight:
                    buf.append(char + escaped)
                elif escaped != "\n":
                    buf.append(escaped)
            else:
                buf.append(char)


def split(line: str) -> list[str]:
    """
    Split `line` into shell words.

    Raises an UnterminatedError subclass when the line is incomplete, with
    `words` and `remainder` attached to the exception.
    """
    result = split_line(line)
    if result.error is not None:
        raise result.error
    return result.words


def accept_multiline(line: str) -> bool:
    """Return True if `line` is complete, False if more input is needed."""
    return not split_line(line).incomplete


def join(words: list[str]) -> str:
    """Join words back into a line, quoting those that need it."""
    out = []
    for word in words:
        if word and not any(c in word for c in SPLIT_CHARS + SINGLE_QUOTE + DOUBLE_QUOTE + ESCAPE_CHAR):
            out.append(word)
        else:
            out.append(SINGLE_QUOTE + word.replace(SINGLE_QUOTE, "'\\''") + SINGLE_QUOTE)
    return " ".join(out)
