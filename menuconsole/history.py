#!/usr/bin/env python3
# menuconsole/history.py
from __future__ import annotations

"""
History set bound to the line reader.

Each menu owns named prompt_toolkit History sources. While a menu is active,
the reader uses a BoundHistory over them: accepted lines are written to every
source, and the lines offered for recall come from the selected one.
"""

import logging
from typing import Iterable, Optional

from prompt_toolkit.history import History, InMemoryHistory

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_NAME = "local history"


def default_history_name(menu_name: str) -> str:
    """Name of the in-memory history every menu starts with."""
    if not menu_name:
        return DEFAULT_HISTORY_NAME
    return f"{DEFAULT_HISTORY_NAME} ({menu_name})"


def default_history() -> History:
    return InMemoryHistory()


class BoundHistory(History):
    """A History fanning writes out to several sources and reading from one."""

    def __init__(self) -> None:
        super().__init__()
        self._names: list[str] = []
        self._sources: dict[str, History] = {}
        self._selected = 0

    def bind(self, names: Iterable[str], sources: dict[str, History]) -> None:
        """Replace the bound set; the first name becomes the selected source."""
        self._names = [name for name in names if name in sources]
        self._sources = {name: sources[name] for name in self._names}
        self._selected = 0
        self._reset_cache()
        logger.debug("bound histories: %s", ", ".join(self._names) or "(none)")

    def select(self, name: str) -> None:
        """Recall lines from the source called `name`."""
        if name not in self._sources:
            raise KeyError(f"No history source named '{name}'.")
        self._selected = self._names.index(name)
        self._reset_cache()

    @property
    def names(self) -> list[str]:
        return list(self._names)

    @property
    def selected(self) -> Optional[str]:
        if not self._names:
            return None
        return self._names[self._selected]

    def _reset_cache(self) -> None:
        # History caches what load() yielded; the next load reads the new source.
        self._loaded = False
        self._loaded_strings = []

    def load_history_strings(self) -> Iterable[str]:
        name = self.selected
        if name is None:
            return
        yield from self._sources[name].load_history_strings()

    def store_string(self, string: str) -> None:
        for name in self._names:
            self._sources[name].append_string(string)
