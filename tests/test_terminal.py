"""Tests for keyboard parsing and terminal setup."""

from __future__ import annotations

import io

import pytest

from liiga_teletext.errors import TerminalError
from liiga_teletext.terminal import Key, Terminal, parse_keys, terminal_size


@pytest.mark.parametrize(
    "data,keys",
    [
        ("q", [Key.QUIT]),
        ("R", [Key.REFRESH]),
        ("\x1b[C\x1b[D", [Key.RIGHT, Key.LEFT]),
        ("\x1b[1;2C", [Key.SHIFT_RIGHT]),
        ("\x1b[1;2D", [Key.SHIFT_LEFT]),
        ("x\x1b[Zr", [Key.REFRESH]),
        ("", []),
    ],
)
def test_parse_keys(data: str, keys: list[Key]) -> None:
    assert parse_keys(data) == keys


class TestTerminal:
    """Tests for Terminal outside a tty."""

    def test_requires_a_tty(self):
        with pytest.raises(TerminalError):
            with Terminal(stdin=io.StringIO(), stdout=io.StringIO()):
                pass

    def test_size_without_terminal(self):
        assert terminal_size(io.StringIO()) == (0, 0)

    def test_write(self):
        out = io.StringIO()
        Terminal(stdin=io.StringIO(), stdout=out).write("hello")
        assert out.getvalue() == "hello"
