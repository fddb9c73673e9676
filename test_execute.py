import io
import os
import signal
import threading

import pytest

from menuconsole import (
    CommandInterrupted,
    CommandTree,
    Console,
    ConsoleBusyError,
    Context,
    DeadlineExceeded,
    ExecutionError,
    Interrupt,
    ParseError,
    PostRunError,
    PreRunError,
)


def setup_console(calls):
    console = Console()
    menu = console.current_menu()

    def commands():
        tree = CommandTree(out=io.StringIO())

        @tree.command()
        def hello(name: str = "world") -> str:
            calls.append(("hello", name))
            return f"hello {name}"

        @tree.command(tags={"admin"})
        def secret() -> None:
            calls.append("secret")

        @tree.command()
        def boom() -> None:
            raise ValueError("kaboom")

        @tree.command()
        def leave() -> None:
            raise SystemExit(3)

        @tree.command()
        def nested() -> str:
            calls.append(("executing", console.is_executing))
            try:
                console.execute(menu, ["hello"])
            except ConsoleBusyError as exc:
                calls.append(exc)
            return menu.run_command_args(["hello", "inner"])

        @tree.command()
        def wait(seconds: float = 5.0, ctx=None) -> str:
            calls.append("waiting")
            ctx.wait(seconds)
            return "done waiting"

        @tree.command()
        def interrupt_me(ctx=None) -> str:
            os.kill(os.getpid(), signal.SIGINT)
            ctx.wait(5)
            calls.append("finished")
            return "ignored"

        return tree

    menu.set_commands(commands)
    return console, menu


def test_execute_returns_result():
    calls = []
    console, menu = setup_console(calls)
    assert console.execute(menu, ["hello", "bob"]) == "hello bob"
    assert calls == [("hello", "bob")]
    assert not console.is_executing


def test_one_foreground_command_at_a_time():
    calls = []
    console, menu = setup_console(calls)
    assert console.execute(menu, ["nested"]) == "hello inner"

    assert calls[0] == ("executing", True)
    assert isinstance(calls[1], ConsoleBusyError)
    assert calls[2] == ("hello", "inner")
    assert not console.is_executing


def test_filtered_command_runs_nothing():
    calls = []
    console, menu = setup_console(calls)
    console.pre_run_hooks.append(lambda: calls.append("pre"))
    console.post_run_hooks.append(lambda: calls.append("post"))
    console.hide_commands("admin")

    assert console.execute(menu, ["secret"]) is None
    assert calls == []

    console.show_commands("admin")
    console.execute(menu, ["secret"])
    assert calls == ["pre", "secret", "post"]


def test_hooks_run_in_order():
    calls = []
    console, menu = setup_console(calls)
    console.pre_run_hooks.extend([lambda: calls.append("pre1"), lambda: calls.append("pre2")])
    console.post_run_hooks.append(lambda: calls.append("post"))

    console.execute(menu, ["hello"])
    assert calls == ["pre1", "pre2", ("hello", "world"), "post"]


def test_pre_run_error_aborts():
    calls = []
    console, menu = setup_console(calls)

    def broken():
        raise RuntimeError("not ready")

    console.pre_run_hooks.extend([broken, lambda: calls.append("never")])
    with pytest.raises(PreRunError) as info:
        console.execute(menu, ["hello"])
    assert str(info.value) == "Pre-run error: not ready"
    assert calls == []
    assert not console.is_executing


def test_post_run_error_is_reported():
    calls = []
    console, menu = setup_console(calls)

    def broken():
        raise RuntimeError("cleanup failed")

    console.post_run_hooks.append(broken)
    with pytest.raises(PostRunError):
        console.execute(menu, ["hello"])
    assert calls == [("hello", "world")]


def test_command_errors_are_wrapped():
    calls = []
    console, menu = setup_console(calls)
    with pytest.raises(ExecutionError) as info:
        console.execute(menu, ["boom"])
    assert str(info.value) == "kaboom"
    assert isinstance(info.value.__cause__, ValueError)

    with pytest.raises(ExecutionError) as info:
        console.execute(menu, ["nosuchcommand"])
    assert "Unknown command" in str(info.value)


def test_system_exit_reaches_the_caller():
    calls = []
    console, menu = setup_console(calls)
    with pytest.raises(SystemExit) as info:
        console.execute(menu, ["leave"])
    assert info.value.code == 3
    assert not console.is_executing


def test_deadline_ends_the_command():
    calls = []
    console, menu = setup_console(calls)
    ctx, _ = Context.with_timeout(0.1)
    with pytest.raises(ExecutionError) as info:
        console.execute(menu, ["wait", "5"], ctx=ctx)
    assert isinstance(info.value.__cause__, DeadlineExceeded)


def test_parent_cancellation_ends_the_command():
    calls = []
    console, menu = setup_console(calls)
    ctx, cancel = Context.with_cancel()
    timer = threading.Timer(0.1, cancel)
    timer.start()
    try:
        with pytest.raises(ExecutionError):
            console.execute(menu, ["wait", "5"], ctx=ctx)
    finally:
        timer.cancel()
    assert calls == ["waiting"]


def test_signal_cancels_command_once():
    calls = []
    console, menu = setup_console(calls)
    handled = []
    post = []
    console.post_run_hooks.append(lambda: post.append("post"))
    menu.add_interrupt(Interrupt.signal(signal.SIGINT), handled.append)
    previous = signal.getsignal(signal.SIGINT)

    with pytest.raises(CommandInterrupted) as info:
        console.execute(menu, ["interrupt-me"])

    assert info.value.interrupt == Interrupt.signal(signal.SIGINT)
    assert handled == [console]
    assert post == []
    assert signal.getsignal(signal.SIGINT) is previous
    assert not console.is_executing


def test_run_command_line():
    calls = []
    console, menu = setup_console(calls)
    assert menu.run_command_line("hello 'big world'") == "hello big world"
    assert menu.run_command_line("") is None
    with pytest.raises(ParseError):
        menu.run_command_line("hello 'open")


def test_root_context_does_not_accumulate_children():
    calls = []
    console, menu = setup_console(calls)
    root = Context.background()
    for _ in range(50):
        console.execute(menu, ["hello"], ctx=root)
    with pytest.raises(ExecutionError):
        console.execute(menu, ["boom"], ctx=root)
    assert len(calls) == 50
    assert root._children == []
    assert not root.done()


def test_second_signal_has_no_further_effect():
    console = Console()
    menu = console.current_menu()
    first_handled = threading.Event()
    second_sent = threading.Event()
    handled = []

    def commands():
        tree = CommandTree(out=io.StringIO())

        @tree.command()
        def interrupt_twice(ctx=None) -> str:
            os.kill(os.getpid(), signal.SIGINT)
            first_handled.wait(5)
            os.kill(os.getpid(), signal.SIGINT)
            second_sent.set()
            ctx.wait(5)
            return "ignored"

        return tree

    def on_interrupt(c):
        handled.append(c)
        first_handled.set()
        # keep the monitor installed until the second signal is delivered
        second_sent.wait(5)

    menu.set_commands(commands)
    menu.add_interrupt(Interrupt.signal(signal.SIGINT), on_interrupt)
    previous = signal.getsignal(signal.SIGINT)

    with pytest.raises(CommandInterrupted):
        console.execute(menu, ["interrupt-twice"])

    assert handled == [console]
    assert second_sent.is_set()
    assert signal.getsignal(signal.SIGINT) is previous
