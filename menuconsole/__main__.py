#!/usr/bin/env python3
# menuconsole/__main__.py
from __future__ import annotations

"""
Demo application: `python -m menuconsole`.

Two menus: the main one, and a "client" menu entered with `connect` and
left with `disconnect` or Ctrl-D. Ctrl-C in the main menu switches menus too,
and Ctrl-D exits.
"""

import logging
import sys
import threading
import time

from . import CTRL_C, EOF, Console, Context, Prompt, load_config
from .commands import CommandResult, CommandTree, add_help_command

logger = logging.getLogger("menuconsole.demo")


def main_commands(console: Console):
    def make() -> CommandTree:
        tree = CommandTree()
        add_help_command(tree, is_hidden=lambda c: console.is_hidden(tree, c))

        @tree.command(description="Print the given words.", example="echo hello 'big world'")
        def echo(*words: str) -> str:
            return " ".join(words)

        @tree.command(description="Wait for some seconds; Ctrl-C cancels.")
        def sleep(seconds: float = 3.0, ctx: Context | None = None) -> CommandResult:
            if ctx is not None and ctx.wait(seconds):
                return CommandResult(False, f"cancelled: {ctx.cause}")
            return CommandResult(True, f"slept {seconds}s")

        @tree.command(description="Enter the client menu.")
        def connect(host: str = "localhost") -> str:
            console.switch_menu("client")
            return f"connected to {host}"

        @tree.command(description="Hide or show admin commands.", example="admin off")
        def admin(state: bool = True) -> None:
            if state:
                console.show_commands("admin")
            else:
                console.hide_commands("admin")

        tree.group("debug", description="Debugging helpers.", tags={"admin"})

        @tree.command(parent="debug", description="Show the active filters.")
        def filters() -> str:
            return ", ".join(sorted(console.filters)) or "(none)"

        @tree.command(description="Leave the console.", aliases=["quit"])
        def exit() -> None:
            raise SystemExit(0)

        return tree

    return make


def client_commands(console: Console):
    def make() -> CommandTree:
        tree = CommandTree()
        add_help_command(tree)

        @tree.command(description="Print asynchronous notifications above the prompt.")
        def ticker(count: int = 3, interval: float = 1.0) -> None:
            def notify() -> None:
                for index in range(1, count + 1):
                    time.sleep(interval)
                    console.transient_printf("notification %d", index)
                logger.info("done notifying")

            threading.Thread(target=notify, daemon=True).start()

        @tree.command(description="Back to the main menu.")
        def disconnect() -> None:
            console.switch_menu("")

        return tree

    return make


def main() -> int:
    console = Console(load_config())

    def exit_ctrl_d(c: Console) -> None:
        raise SystemExit(0)

    def switch_menu(c: Console) -> None:
        c.switch_menu("client" if c.current_menu().name == "" else "")

    menu = console.current_menu()
    menu.set_commands(main_commands(console))
    menu.add_interrupt(EOF, exit_ctrl_d)
    menu.add_interrupt(CTRL_C, switch_menu)

    client = console.new_menu("client")
    client.set_commands(client_commands(console))
    client.add_interrupt(EOF, lambda c: c.switch_menu(""))
    client.prompt = Prompt(
        primary=lambda: f"{console.name} [client] > ",
        right=lambda: time.strftime("%H:%M:%S"),
    )

    console.set_print_logo(lambda c: c.printf("%s - type 'help' to list commands", c.name))
    try:
        console.start()
    except SystemExit as exc:
        return int(exc.code or 0)
    return 0


if __name__ == "__main__":
    sys.exit(main())
