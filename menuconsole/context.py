#!/usr/bin/env python3
# menuconsole/context.py
from __future__ import annotations

"""
Cancellation contexts for command execution.

A Context is cancelled at most once, with a cause. Cancelling a context
cancels all of its children. Commands observe cancellation cooperatively,
through `done()`, `wait()` or `raise_if_cancelled()`.
"""

import threading
import time
from typing import Callable, Optional


class Cancelled(Exception):
    """Cause recorded when a context is cancelled without an explicit error."""

    def __init__(self, message: str = "context cancelled") -> None:
        super().__init__(message)


class DeadlineExceeded(Exception):
    """Cause recorded when a context deadline passes."""

    def __init__(self, message: str = "context deadline exceeded") -> None:
        super().__init__(message)


class Context:
    """A cancellable execution context with an optional deadline."""

    def __init__(self, parent: Optional["Context"] = None, deadline: Optional[float] = None) -> None:
        self._parent = parent
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._cause: Optional[BaseException] = None
        self._children: list[Context] = []
        self._callbacks: list[Callable[[Context], None]] = []

        # monotonic timestamp; a child never outlives its parent's deadline
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline = deadline

        if parent is not None:
            parent._adopt(self)

    # ---------------- Constructors ----------------

    @classmethod
    def background(cls) -> "Context":
        """Return a fresh root context that is never cancelled on its own."""
        return cls()

    @classmethod
    def with_cancel(cls, parent: Optional["Context"] = None) -> tuple["Context", Callable[..., bool]]:
        """Return a child context and its cancel function."""
        ctx = cls(parent)
        return ctx, ctx.cancel

    @classmethod
    def with_timeout(cls, seconds: float, parent: Optional["Context"] = None) -> tuple["Context", Callable[..., bool]]:
        """Return a child context expiring after `seconds`, and its cancel function."""
        ctx = cls(parent, deadline=time.monotonic() + seconds)
        return ctx, ctx.cancel

    # ---------------- Cancellation ----------------

    def cancel(self, cause: Optional[BaseException] = None) -> bool:
        """
        Cancel this context and its children.

        Returns True if this call cancelled the context, False if it was
        already done (the first cause wins).
        """
        with self._lock:
            if self._done.is_set():
                return False
            self._cause = cause if cause is not None else Cancelled()
            self._done.set()
            children = list(self._children)
            callbacks = list(self._callbacks)
            self._children.clear()
            self._callbacks.clear()

        if self._parent is not None:
            self._parent._remove_child(self)
        for child in children:
            child.cancel(self._cause)
        for callback in callbacks:
            callback(self)
        return True

    def add_done_callback(self, callback: Callable[["Context"], None]) -> None:
        """Call `callback(ctx)` once the context is done (immediately if it is)."""
        with self._lock:
            if not self._done.is_set():
                self._callbacks.append(callback)
                return
        callback(self)

    def _remove_child(self, child: "Context") -> None:
        with self._lock:
            if child in self._children:
                self._children.remove(child)

    def _adopt(self, child: "Context") -> None:
        with self._lock:
            if not self._done.is_set():
                self._children.append(child)
                return
            cause = self._cause
        child.cancel(cause)

    # ---------------- Observation ----------------

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without a deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def done(self) -> bool:
        """Return True once the context is cancelled or past its deadline."""
        if not self._done.is_set() and self.deadline is not None and time.monotonic() >= self.deadline:
            self.cancel(DeadlineExceeded())
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the context is done or `timeout` elapses."""
        limit = self.remaining()
        if limit is not None and (timeout is None or limit < timeout):
            if not self._done.wait(limit):
                return self.done()
            return True
        return self._done.wait(timeout)

    @property
    def cause(self) -> Optional[BaseException]:
        """The cancellation cause, or None while the context is live."""
        self.done()
        return self._cause

    def raise_if_cancelled(self) -> None:
        """Raise the cancellation cause if the context is done."""
        if self.done():
            raise self._cause  # type: ignore[misc]
