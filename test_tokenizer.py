import pytest

from menuconsole.interface.tokenizer import (
    State,
    UnterminatedDoubleQuoteError,
    UnterminatedEscapeError,
    UnterminatedSingleQuoteError,
    accept_multiline,
    join,
    split,
    split_line,
)
from menuconsole.ui import strip_ansi


def test_splits_on_whitespace():
    assert split("a b  c\td\n") == ["a", "b", "c", "d"]
    assert split("") == []
    assert split("   ") == []


def test_quotes_group_words():
    assert split("echo 'a b' \"c d\" e") == ["echo", "a b", "c d", "e"]
    assert split("pre'fix 'post") == ["prefix post"]
    assert split("''") == [""]


def test_single_quotes_are_literal():
    assert split(r"'a\b $x'") == [r"a\b $x"]


def test_double_quote_escapes():
    assert split(r'"a\"b"') == ['a"b']
    assert split(r'"a\\b"') == ["a\\b"]
    assert split(r'"\$HOME"') == ["$HOME"]
    # not in the escape set: the backslash stays
    assert split(r'"a\nb"') == ["a\\nb"]


def test_raw_escapes():
    assert split(r"a\ b c") == ["a b", "c"]
    assert split("ab\\\ncd") == ["abcd"]


def test_tokens_record_opening_state():
    result = split_line("plain 'single' \"double\"")
    assert [t.state for t in result.tokens] == [State.RAW, State.SINGLE_QUOTE, State.DOUBLE_QUOTE]
    assert result.error is None
    assert result.remainder == ""


def test_join_round_trip():
    samples = [
        ["echo", "hello"],
        ["say", "a b", "it's", ""],
        ["path", "C:\\temp", '"quoted"', "tab\there"],
        ["multi", "line\nword"],
    ]
    for words in samples:
        assert split(join(words)) == words


def test_balanced_quotes_never_error():
    for line in ["a 'b' c", 'x "y z" w', "'' \"\"", "a\\ b"]:
        result = split_line(line)
        assert result.error is None
        assert not result.incomplete


def test_unterminated_single_quote():
    with pytest.raises(UnterminatedSingleQuoteError) as info:
        split("echo 'abc")
    assert info.value.words == ["echo"]
    assert info.value.remainder == "'abc"


def test_unterminated_double_quote():
    with pytest.raises(UnterminatedDoubleQuoteError) as info:
        split('say "hi there')
    assert info.value.words == ["say"]
    assert info.value.remainder == '"hi there'


def test_unterminated_escape():
    with pytest.raises(UnterminatedEscapeError):
        split("abc\\")


def test_split_line_does_not_raise():
    result = split_line("a 'b")
    assert result.incomplete
    assert result.words == ["a"]


def test_accept_multiline():
    assert accept_multiline("a 'b c'")
    assert not accept_multiline("a 'b")
    assert not accept_multiline('a "b')
    assert not accept_multiline("a \\")
    assert accept_multiline("a 'b\nc'")


def test_highlight_mode_keeps_alignment():
    line = "cmd  'a b' --flag\t\"x\""
    result = split_line(line, highlight=True)
    colored = "".join(result.words)
    assert colored != line
    assert strip_ansi(colored) == line


def test_highlight_mode_keeps_unterminated_text():
    line = "cmd 'open"
    result = split_line(line, highlight=True)
    assert result.incomplete
    assert strip_ansi("".join(result.words) + result.remainder) == line
