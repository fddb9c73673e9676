#!/usr/bin/env python3
# menuconsole/prompt.py
from __future__ import annotations

"""
Per-menu prompt strings.

A Prompt is a set of functions returning the strings to print for each prompt
slot. Slots left as None are not printed (the secondary prompt then defaults
to an empty continuation).
"""

from dataclasses import dataclass
from typing import Callable, Optional

PromptFunc = Callable[[], str]


@dataclass(slots=True)
class Prompt:
    """
    Prompt slots of a menu.

    Attributes:
        primary: Main prompt.
        secondary: Prompt shown while a multi-line command is being typed.
        right: Prompt printed on the right side of the screen.
        transient: Replaces the primary prompt once the line is accepted.
    """
    primary: Optional[PromptFunc] = None
    secondary: Optional[PromptFunc] = None
    right: Optional[PromptFunc] = None
    transient: Optional[PromptFunc] = None

    def render(self, slot: str) -> str:
        """Return the string for `slot`, or "" when it is unset."""
        func = getattr(self, slot)
        if func is None:
            return ""
        return func()


def default_prompt(app_name: str, menu_name: str) -> Prompt:
    """'app > ' for the default menu, 'app [menu] > ' for the others."""

    def primary() -> str:
        if not menu_name:
            return f"{app_name} > "
        return f"{app_name} [{menu_name}] > "

    return Prompt(primary=primary)
