from prompt_toolkit.history import FileHistory, InMemoryHistory

from menuconsole import CTRL_C, EOF, CommandTree, Console, Interrupt
from menuconsole.history import BoundHistory
from menuconsole.interface import BaseReader


class CountingReader(BaseReader):
    def __init__(self):
        super().__init__()
        self.binds = 0

    def bind_histories(self, names, sources):
        self.binds += 1
        return super().bind_histories(names, sources)


def active_menus(console):
    return [name for name, menu in console.menus.items() if menu.active]


def test_default_menu_is_active():
    console = Console()
    assert console.current_menu().name == ""
    assert active_menus(console) == [""]


def test_switching_keeps_exactly_one_active():
    console = Console()
    console.new_menu("client")
    console.new_menu("server")

    for name in ["client", "server", "", "client", "missing", "client", ""]:
        console.switch_menu(name)
        assert len(active_menus(console)) == 1
        assert console.current_menu().active

    assert console.current_menu().name == ""


def test_switch_to_active_menu_is_a_no_op():
    reader = CountingReader()
    console = Console(reader=reader)
    console.new_menu("client")

    console.switch_menu("client")
    current = console.current_menu()
    binds = reader.binds
    names = reader.history.names
    tree = current.commands()

    console.switch_menu(current.name)
    assert reader.binds == binds
    assert console.current_menu() is current
    assert active_menus(console) == ["client"]
    assert reader.history.names == names
    assert current.commands() is tree


def test_switch_rebinds_histories_and_regenerates_commands():
    reader = CountingReader()
    console = Console(reader=reader)
    client = console.new_menu("client")
    generated = []

    def commands():
        generated.append(1)
        return CommandTree()

    client.set_commands(commands)

    console.switch_menu("client")
    assert reader.history.names == ["local history (client)"]
    assert generated == [1]


def test_replacing_active_menu_keeps_it_active():
    console = Console()
    console.new_menu("client")
    console.switch_menu("client")
    replacement = console.new_menu("client")
    assert replacement.active
    assert console.current_menu() is replacement
    assert active_menus(console) == ["client"]


def test_menu_lookup():
    console = Console()
    client = console.new_menu("client")
    assert console.menu("client") is client
    assert console.menu("nope") is None


def test_default_histories():
    console = Console()
    client = console.new_menu("client")
    assert console.current_menu().history_names == ["local history"]
    assert client.history_names == ["local history (client)"]


def test_history_sources(tmp_path):
    console = Console()
    menu = console.current_menu()
    extra = InMemoryHistory()
    menu.add_history_source("extra", extra)
    source = menu.add_history_source_file("file", tmp_path / "nested" / "history")

    assert isinstance(source, FileHistory)
    assert (tmp_path / "nested").is_dir()
    assert menu.history_names == ["local history", "extra", "file"]

    menu.delete_history_source("extra")
    menu.delete_history_source("unknown")
    assert menu.history_names == ["local history", "file"]
    assert "extra" not in menu.histories


def test_bound_history_writes_everywhere_reads_selected():
    first, second = InMemoryHistory(), InMemoryHistory()
    bound = BoundHistory()
    bound.bind(["first", "second"], {"first": first, "second": second})
    bound.append_string("one")
    bound.append_string("two")

    assert list(first.load_history_strings()) == ["two", "one"]
    assert list(second.load_history_strings()) == ["two", "one"]
    assert bound.selected == "first"

    second.append_string("only-second")
    bound.select("second")
    assert list(bound.load_history_strings()) == ["only-second", "two", "one"]


def test_interrupt_registry():
    console = Console()
    menu = console.current_menu()
    calls = []
    menu.add_interrupt(EOF, lambda c: calls.append(("eof", c)))
    menu.add_interrupt(CTRL_C, lambda c: calls.append(("ctrl-c", c)))
    menu.add_interrupt(Interrupt.signal(15), lambda c: calls.append(("term", c)))

    assert menu.handle_interrupt(EOF)
    assert menu.handle_interrupt(Interrupt.signal(15))
    assert calls == [("eof", console), ("term", console)]

    menu.del_interrupt(EOF)
    assert not menu.handle_interrupt(EOF)
    assert menu.handle_interrupt(CTRL_C)

    menu.del_interrupt()
    assert menu.interrupts == {}


def test_interrupt_sentinels():
    assert Interrupt.signal(2) == Interrupt.signal(2)
    assert Interrupt.signal(2) != CTRL_C
    assert str(Interrupt.signal(2)) == "SIGINT"
    assert str(EOF) == "eof"


def test_filters():
    console = Console()
    console.hide_commands("admin", "debug")
    assert console.filters == {"admin", "debug"}
    console.show_commands("debug")
    assert console.filters == {"admin"}
    console.show_commands()
    assert console.filters == set()
