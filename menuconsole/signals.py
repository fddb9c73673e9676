#!/usr/bin/env python3
# menuconsole/signals.py
from __future__ import annotations

"""
OS signal interception during command execution.

SignalMonitor installs handlers for SIGINT, SIGTERM and SIGQUIT (where the
platform has them) for the duration of a `with` block, and restores the
previous handlers on exit. Caught signal numbers are passed to `notify`,
which runs inside a signal handler and must therefore only do reentrant-safe
work (e.g. queue.SimpleQueue.put).

Python only delivers signals to the main thread; off the main thread the
monitor installs nothing.
"""

import logging
import signal
import threading
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

CAUGHT_SIGNALS: tuple[int, ...] = tuple(
    getattr(signal, name) for name in ("SIGINT", "SIGTERM", "SIGQUIT") if hasattr(signal, name)
)


class SignalMonitor:
    """Context manager routing caught signals to a callback."""

    def __init__(self, notify: Callable[[int], None], signals: Iterable[int] = CAUGHT_SIGNALS) -> None:
        self._notify = notify
        self._signals = tuple(signals)
        self._previous: dict[int, object] = {}

    @property
    def active(self) -> bool:
        return bool(self._previous)

    def _handle(self, signum: int, frame: object) -> None:
        self._notify(signum)

    def __enter__(self) -> "SignalMonitor":
        if threading.current_thread() is not threading.main_thread():
            logger.debug("not on the main thread, signals are not monitored")
            return self
        for signum in self._signals:
            try:
                self._previous[signum] = signal.signal(signum, self._handle)
            except (OSError, ValueError) as exc:
                logger.debug("cannot monitor signal %s: %s", signum, exc)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        for signum, previous in self._previous.items():
            # None means the previous handler was not installed from Python
            signal.signal(signum, previous if previous is not None else signal.SIG_DFL)
        self._previous.clear()
