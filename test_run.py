import io

import pytest

from menuconsole import (
    CTRL_C,
    EOF,
    CommandsError,
    CommandTree,
    Console,
    ConsoleConfig,
    Context,
    ExecutionError,
    LineHookError,
    PreReadError,
    Prompt,
)
from menuconsole.interface import BaseReader
from menuconsole.ui import CURSOR_UP, strip_ansi


class ScriptedReader(BaseReader):
    """Feeds lines from a script; exception classes in the script are raised."""

    def __init__(self, script):
        super().__init__()
        self.script = list(script)
        self.prompts = []
        self.transients = []

    def read_line(self, prompt, *, continuation=False, rprompt=""):
        self.prompts.append((prompt, continuation))
        if not self.script:
            raise EOFError
        item = self.script.pop(0)
        if isinstance(item, type) and issubclass(item, BaseException):
            raise item
        return item

    def show_transient(self, text, lines=1):
        self.transients.append((text, lines))


def make_console(script, calls, config=None):
    errors = []
    reader = ScriptedReader(script)
    console = Console(config, reader=reader, error_handler=errors.append)

    def main_commands():
        tree = CommandTree(out=io.StringIO())

        @tree.command()
        def hello(name: str = "world") -> None:
            calls.append(("hello", name))

        @tree.command()
        def go() -> None:
            console.switch_menu("client")

        @tree.command()
        def leave() -> None:
            raise SystemExit(0)

        return tree

    def client_commands():
        tree = CommandTree(out=io.StringIO())

        @tree.command()
        def ping() -> None:
            calls.append("ping")

        return tree

    console.current_menu().set_commands(main_commands)
    console.new_menu("client").set_commands(client_commands)
    return console, reader, errors


def test_eof_handler_runs_once_and_no_command_runs():
    calls = []
    console, reader, errors = make_console([EOFError], calls)
    ctx, cancel = Context.with_cancel()
    handled = []

    def on_eof(c):
        handled.append(c)
        cancel()

    console.current_menu().add_interrupt(EOF, on_eof)
    console.start(ctx)

    assert handled == [console]
    assert calls == []
    assert errors == []


def test_eof_without_handler_ends_the_loop():
    calls = []
    console, reader, errors = make_console(["hello a", "hello b"], calls)
    console.start()
    assert calls == [("hello", "a"), ("hello", "b")]
    assert reader.prompts[0] == ("console > ", False)


def test_ctrl_c_is_dispatched_and_loop_continues():
    calls = []
    console, reader, errors = make_console([KeyboardInterrupt, "hello"], calls)
    seen = []
    console.current_menu().add_interrupt(CTRL_C, seen.append)
    console.start()
    assert seen == [console]
    assert calls == [("hello", "world")]


def test_ctrl_c_without_handler_continues():
    calls = []
    console, reader, errors = make_console([KeyboardInterrupt, "hello"], calls)
    console.run()
    assert calls == [("hello", "world")]


def test_unterminated_lines_are_continued():
    calls = []
    console, reader, errors = make_console(["hello 'first", "second'"], calls)
    console.start()

    assert calls == [("hello", "first\nsecond")]
    assert reader.prompts[1] == ("> ", True)
    menu = console.current_menu()
    assert list(menu.histories["local history"].load_history_strings()) == ["hello 'first\nsecond'"]


def test_secondary_prompt_comes_from_the_menu():
    calls = []
    console, reader, errors = make_console(["hello \\", "there"], calls)
    console.current_menu().prompt = Prompt(primary=lambda: "$ ", secondary=lambda: "... ")
    console.start()
    assert calls == [("hello", "there")]
    assert reader.prompts[:2] == [("$ ", False), ("... ", True)]


def test_active_menu_is_refetched_after_switch():
    calls = []
    console, reader, errors = make_console(["go", "ping", "hello"], calls)
    console.start()
    assert calls == ["ping"]
    assert len(errors) == 1
    assert isinstance(errors[0], ExecutionError)
    assert console.current_menu().name == "client"
    assert reader.prompts[1][0] == "console [client] > "


def test_errors_are_reported_and_loop_resumes():
    calls = []
    console, reader, errors = make_console(["nope", "hello"], calls)
    console.start()
    assert calls == [("hello", "world")]
    assert "Unknown command: nope" in str(errors[0])


def test_pre_read_hook_errors_are_reported():
    calls = []
    console, reader, errors = make_console(["hello"], calls)

    def broken():
        raise RuntimeError("no terminal")

    console.pre_read_hooks.append(broken)
    console.start()
    assert calls == [("hello", "world")]
    assert isinstance(errors[0], PreReadError)
    assert str(errors[0]) == "Pre-read error: no terminal"


def test_line_hooks_rewrite_arguments():
    calls = []
    console, reader, errors = make_console(["hi", "bad"], calls)

    def alias(args):
        return ["hello", "alias"] if args == ["hi"] else args

    def reject(args):
        if args == ["bad"]:
            raise ValueError("rejected")
        return args

    console.pre_run_line_hooks.extend([alias, reject])
    console.start()
    assert calls == [("hello", "alias")]
    assert isinstance(errors[0], LineHookError)
    assert str(errors[0]) == "Line error: rejected"


def test_empty_lines_run_nothing():
    calls = []
    console, reader, errors = make_console(["", "   "], calls)
    console.start()
    assert calls == []
    assert errors == []
    assert list(console.current_menu().histories["local history"].load_history_strings()) == []


def test_system_exit_leaves_the_loop():
    calls = []
    console, reader, errors = make_console(["leave", "hello"], calls)
    with pytest.raises(SystemExit):
        console.start()
    assert calls == []


def test_logo_is_printed_once():
    calls = []
    console, reader, errors = make_console(["hello", "hello"], calls)
    logos = []
    console.set_print_logo(logos.append)
    console.start()
    assert logos == [console]


def test_transient_prompt_replaces_accepted_line():
    calls = []
    console, reader, errors = make_console(["hello"], calls, ConsoleConfig(highlighting=False))
    console.current_menu().prompt = Prompt(primary=lambda: "long prompt > ", transient=lambda: "> ")
    console.start()
    assert reader.transients == [("> hello", 1)]


def test_newlines_around_output(capsys):
    calls = []
    config = ConsoleConfig(newline_before=True, newline_after=True)
    console, reader, errors = make_console(["hello", " "], calls, config)
    console.start()
    # one blank line before and after "hello"; the blank input prints nothing
    assert capsys.readouterr().out == "\n\n"


def test_highlighting_colors_known_commands():
    calls = []
    console, reader, errors = make_console([], calls)
    line = "hello --loud 'x y'"
    colored = console.highlight(line)
    assert colored.startswith(console.config.command_highlight + "hello")
    assert console.config.flag_highlight + "--loud" in colored
    assert strip_ansi(colored) == line
    assert console.highlight("unknown") == "unknown"


def test_console_completion_uses_active_menu():
    calls = []
    console, reader, errors = make_console([], calls)
    assert console.complete("he").values == ["hello"]
    console.switch_menu("client")
    assert console.complete("").values == ["ping"]


def test_loop_root_context_stays_small():
    calls = []
    console, reader, errors = make_console(["hello"] * 20 + ["nope"], calls)
    root = Context.background()
    console.start(root)
    assert len(calls) == 20
    assert len(errors) == 1
    assert root._children == []


def test_failing_commands_provider_is_reported():
    calls = []
    generated = []
    errors = []
    console = Console(reader=ScriptedReader(["hello", "hello"]), error_handler=errors.append)

    def commands():
        generated.append(1)
        if len(generated) == 2:
            raise RuntimeError("provider broke")
        tree = CommandTree(out=io.StringIO())

        @tree.command()
        def hello() -> None:
            calls.append("hello")

        return tree

    console.current_menu().set_commands(commands)
    console.start()

    # the previous tree stays in use for the failed iteration
    assert calls == ["hello", "hello"]
    assert len(errors) == 1
    assert isinstance(errors[0], CommandsError)
    assert str(errors[0]) == "Commands error: provider broke"


def test_failing_provider_on_switch_is_reported():
    errors = []
    console = Console(reader=ScriptedReader([]), error_handler=errors.append)
    client = console.new_menu("client")

    def broken():
        raise RuntimeError("no backend")

    client.set_commands(broken)
    console.switch_menu("client")
    assert console.current_menu() is client
    assert str(errors[0]) == "Commands error: no backend"
    assert list(client.commands().commands()) == []


def test_printf_ends_a_run_of_transient_messages(capsys):
    calls = []
    console, reader, errors = make_console([], calls, ConsoleConfig(newline_after=True))
    console.transient_printf("a")
    console.transient_printf("b")
    console.printf("c %d", 1)
    console.transient_printf("d")
    assert capsys.readouterr().out == f"a\n\n{CURSOR_UP}b\n\nc 1\nd\n\n"
