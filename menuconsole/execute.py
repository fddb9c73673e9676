#!/usr/bin/env python3
# menuconsole/execute.py
from __future__ import annotations

"""
Command execution controller.

Runs one command line against a menu's command tree:

    busy check -> hidden check -> pre-run hooks -> command thread
      (callback, then post-run hooks) raced against OS signals

The command runs in its own thread, bound to a cancellable Context. The
calling thread waits for whichever comes first: the context being done
(completion, failure, parent cancellation or deadline) or a caught signal.
A signal cancels the context and is dispatched to the menu's interrupt
handlers; the command thread is never killed and keeps running detached if
it ignores cancellation.
"""

import logging
import queue
import threading
from typing import TYPE_CHECKING, Any, Optional, Sequence

from .context import Cancelled, Context, DeadlineExceeded
from .errors import (
    CommandInterrupted,
    ConsoleError,
    ExecutionError,
    PostRunError,
    PreRunError,
)
from .interrupt import Interrupt
from .signals import SignalMonitor

if TYPE_CHECKING:
    from .console import Console
    from .menu import Menu

logger = logging.getLogger(__name__)

# Upper bound on one wait of the race, so deadlines and pending signals are noticed.
POLL_INTERVAL = 0.1

_DONE = object()


def execute(
    console: Console,
    menu: Menu,
    args: Sequence[str],
    *,
    async_: bool = False,
    ctx: Optional[Context] = None,
) -> Any:
    """
    Execute `args` with the commands of `menu`.

    Unless `async_` is set, the console is marked as executing for the whole
    call, and ConsoleBusyError is raised if a foreground command already runs.
    Returns the command result, or None for filtered commands.
    """
    if not async_:
        console._acquire_foreground()
    try:
        return _execute(console, menu, list(args), ctx)
    finally:
        if not async_:
            console._release_foreground()


def _execute(console: Console, menu: Menu, args: list[str], ctx: Optional[Context]) -> Any:
    # Use this tree throughout, even if the menu regenerates its commands meanwhile
    tree = menu.commands()

    target, _ = tree.find(args)
    if console.is_hidden(tree, target):
        logger.debug("command '%s' is filtered, not running it", " ".join(args))
        return None

    try:
        console._run_hooks(console.pre_run_hooks)
    except Exception as exc:
        raise PreRunError(str(exc)) from exc

    cmd_ctx = Context(ctx or Context.background())
    events: queue.SimpleQueue = queue.SimpleQueue()
    cmd_ctx.add_done_callback(lambda _ctx: events.put(_DONE))

    completed = Cancelled("command completed")
    outcome: dict[str, Any] = {}

    def run() -> None:
        try:
            result = tree.execute(list(args), ctx=cmd_ctx)
        except SystemExit as exc:
            cmd_ctx.cancel(exc)
            return
        except ConsoleError as exc:
            cmd_ctx.cancel(exc)
            return
        except Exception as exc:
            error = ExecutionError(str(exc) or type(exc).__name__)
            error.__cause__ = exc
            cmd_ctx.cancel(error)
            return

        # Interrupted while running: the post-run hooks are skipped
        if cmd_ctx.done():
            return
        try:
            console._run_hooks(console.post_run_hooks)
        except Exception as exc:
            error = PostRunError(str(exc))
            error.__cause__ = exc
            cmd_ctx.cancel(error)
            return

        outcome["result"] = result
        cmd_ctx.cancel(completed)

    def on_signal(signum: int) -> None:
        events.put(signum)

    name = args[0] if args else "command"
    worker = threading.Thread(target=run, name=f"menuconsole-{name}", daemon=True)

    with SignalMonitor(on_signal):
        worker.start()
        while True:
            remaining = cmd_ctx.remaining()
            timeout = POLL_INTERVAL if remaining is None else min(POLL_INTERVAL, remaining)
            try:
                event = events.get(timeout=timeout)
            except queue.Empty:
                # done() notices an expired deadline and enqueues _DONE
                cmd_ctx.done()
                continue
            if event is _DONE:
                break

            interrupt = Interrupt.signal(event)
            if cmd_ctx.cancel(CommandInterrupted(interrupt)):
                logger.debug("command '%s' interrupted by %s", name, interrupt)
                menu.handle_interrupt(interrupt)

    cause = cmd_ctx.cause
    if cause is completed:
        return outcome.get("result")
    if isinstance(cause, SystemExit):
        raise cause
    if isinstance(cause, ConsoleError):
        raise cause
    if isinstance(cause, DeadlineExceeded):
        raise ExecutionError(str(cause)) from cause
    raise ExecutionError(str(cause) or type(cause).__name__) from cause
