#!/usr/bin/env python3
# menuconsole/interface/completion.py
from __future__ import annotations

"""
Command line completion utilities.

This module offers token-aware suggestions over a menu's command tree:
- Command words: names and aliases of the (sub)commands under the words typed so far.
- Arguments: parameter keys (key=) and values via per-command completers.

Commands hidden by the console filters are never suggested.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from prompt_toolkit.completion import Completer, Completion

from menuconsole.commands import Command, CommandTree

from .tokenizer import DOUBLE_QUOTE, SINGLE_QUOTE, split_line


@dataclass(slots=True)
class Completions:
    """
    Candidates for the word under the cursor.

    Attributes:
        values: Replacement words, sorted.
        prefix: The part of the current word already typed (replaced on accept).
        descriptions: Optional help text per value.
    """
    values: list[str] = field(default_factory=list)
    prefix: str = ""
    descriptions: dict[str, str] = field(default_factory=dict)


def _split_current_token(text_before_cursor: str) -> tuple[list[str], str]:
    """
    Return (completed_words, current_prefix).

    Behavior:
      - Split with the console tokenizer (quotes and escapes honored).
      - If trailing whitespace exists, the current word is empty.
      - On an unterminated quote, the open quoted text is the current word.
    """
    if not text_before_cursor:
        return [], ""

    result = split_line(text_before_cursor)
    if result.error is not None:
        prefix = result.remainder
        if prefix[:1] in (SINGLE_QUOTE, DOUBLE_QUOTE):
            prefix = prefix[1:]
        return list(result.words), prefix

    words = list(result.words)
    if text_before_cursor[-1].isspace() or not words:
        return words, ""
    return words[:-1], words[-1]


def _split_key_value(token: str) -> tuple[str | None, str]:
    """If token appears as 'key=value' (or '--key=value') return (key, value_prefix), else (None, token)."""
    if "=" in token:
        key, value = token.split("=", 1)
        return key.lstrip("-").replace("-", "_"), value
    return None, token


def _visible(tree: CommandTree, command_obj: Command, filters: Iterable[str]) -> bool:
    hidden = set(filters)
    return not hidden or not (set(tree.tags_of(command_obj)) & hidden)


def complete_commands(
    tree: CommandTree,
    line: str,
    cursor: int | None = None,
    *,
    filters: Iterable[str] = (),
) -> Completions:
    """
    Produce completions for `line` with the cursor at `cursor` (default: end of line).

    Strategy:
      1) While the typed words resolve to a group (or the root), suggest its
         visible subcommands.
      2) For a known command, suggest:
         - parameter keys as 'name='
         - parameter values using the command's completer providers
         - positional arguments via providers 'posN' or 'pos*'
    """
    filters = tuple(filters)
    text_before_cursor = line[:len(line) if cursor is None else cursor].lstrip()
    words, current_prefix = _split_current_token(text_before_cursor)

    target, argument_tokens = tree.find(words)
    if target is not tree.root and not _visible(tree, target, filters):
        return Completions(prefix=current_prefix)

    # Completing a command word under a group or the root.
    if not argument_tokens and target.commands():
        descriptions: dict[str, str] = {}
        for child in target.commands():
            if not _visible(tree, child, filters):
                continue
            for word in (child.name, *child.aliases):
                if word.startswith(current_prefix):
                    descriptions[word] = child.description
        return Completions(sorted(descriptions), current_prefix, descriptions)

    if target is tree.root or target.callback is None:
        return Completions(prefix=current_prefix)

    return _complete_arguments(target, [*argument_tokens, current_prefix], current_prefix)


def _complete_arguments(command_obj: Command, argument_tokens: list[str], current_token: str) -> Completions:
    key, value_prefix = _split_key_value(current_token)

    # Suggest parameter keys when typing the key segment
    if key is None and current_token and not current_token.startswith("-"):
        parameter_keys = [
            k for k in command_obj.completers.keys() if not k.startswith("pos")]
        parameter_keys = sorted(set(parameter_keys + list(command_obj.param_names)))
        values = [f"{k}=" for k in parameter_keys if f"{k}=".startswith(current_token)]
        if values:
            return Completions(values, current_token)

    # Long options for keyword parameters
    if current_token.startswith("-") and key is None:
        options = sorted(f"--{name.replace('_', '-')}" for name in command_obj.param_names)
        return Completions([o for o in options if o.startswith(current_token)], current_token)

    # Suggest values for key=value patterns using the provider
    if key is not None:
        provider = command_obj.completers.get(key)
        if not provider:
            return Completions(prefix=current_token)
        head = current_token[:len(current_token) - len(value_prefix)]
        values = [f"{head}{value}" for value in provider(text=value_prefix, argv=argument_tokens, index=None)]
        return Completions(sorted(values), current_token)

    # Positional argument suggestions
    positional_only = [
        token for token in argument_tokens if "=" not in token and not token.startswith("-")]
    position_index = max(0, len(positional_only) - 1)
    provider = command_obj.completers.get(
        f"pos{position_index}") or command_obj.completers.get("pos*")
    if not provider:
        return Completions(prefix=current_token)
    values = [v for v in provider(text=current_token, argv=argument_tokens, index=position_index)
              if v.startswith(current_token)]
    return Completions(sorted(values), current_token)


class ConsoleCompleter(Completer):
    """prompt_toolkit completer delegating to a `(line, cursor) -> Completions` function."""

    def __init__(self, complete: Callable[[str, int], Completions]) -> None:
        self._complete = complete

    def get_completions(self, document: Any, complete_event: Any):
        completions = self._complete(document.text, document.cursor_position)
        # replace exactly the current token
        replace_len = len(completions.prefix)
        for word in completions.values:
            yield Completion(
                word,
                start_position=-replace_len,
                display_meta=completions.descriptions.get(word) or None,
            )
