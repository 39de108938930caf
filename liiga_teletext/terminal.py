"""Raw-mode keyboard input and terminal size for the interactive loop."""

from __future__ import annotations

import os
import select
import sys
import termios
import tty
from enum import Enum
from typing import TextIO

from rich.control import Control

from .errors import TerminalError


class Key(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    SHIFT_LEFT = "shift_left"
    SHIFT_RIGHT = "shift_right"
    REFRESH = "refresh"
    QUIT = "quit"


_SEQUENCES: dict[str, Key] = {
    "\x1b[C": Key.RIGHT,
    "\x1b[D": Key.LEFT,
    "\x1bOC": Key.RIGHT,
    "\x1bOD": Key.LEFT,
    "\x1b[1;2C": Key.SHIFT_RIGHT,
    "\x1b[1;2D": Key.SHIFT_LEFT,
    "\x1b[c": Key.SHIFT_RIGHT,
    "\x1b[d": Key.SHIFT_LEFT,
}

_CHARS: dict[str, Key] = {"q": Key.QUIT, "Q": Key.QUIT, "r": Key.REFRESH, "R": Key.REFRESH, "\x03": Key.QUIT}


def parse_keys(data: str) -> list[Key]:
    """Keys found in a chunk of raw input; unknown bytes are skipped."""
    keys: list[Key] = []
    index = 0
    while index < len(data):
        if data[index] == "\x1b":
            for sequence in sorted(_SEQUENCES, key=len, reverse=True):
                if data.startswith(sequence, index):
                    keys.append(_SEQUENCES[sequence])
                    index += len(sequence)
                    break
            else:
                index += 1
            continue
        key = _CHARS.get(data[index])
        if key is not None:
            keys.append(key)
        index += 1
    return keys


def terminal_size(stream: TextIO | None = None) -> tuple[int, int]:
    """``(width, height)``; ``(0, 0)`` when it cannot be detected."""
    stream = stream or sys.stdout
    try:
        size = os.get_terminal_size(stream.fileno())
    except (OSError, ValueError):
        return 0, 0
    return size.columns, size.lines


class Terminal:
    """Raw keyboard mode plus the alternate screen, restored on exit."""

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self._saved: list | None = None

    def __enter__(self) -> Terminal:
        if not self.stdin.isatty():
            raise TerminalError("Interactive mode needs a terminal; use --once for piped output")
        fd = self.stdin.fileno()
        try:
            self._saved = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except termios.error as exc:
            raise TerminalError(f"Cannot set terminal mode: {exc}") from exc
        self.write(str(Control.alt_screen(True)) + str(Control.show_cursor(False)))
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.write(str(Control.show_cursor(True)) + str(Control.alt_screen(False)))
        if self._saved is not None:
            termios.tcsetattr(self.stdin.fileno(), termios.TCSADRAIN, self._saved)
            self._saved = None

    def write(self, text: str) -> None:
        try:
            self.stdout.write(text)
            self.stdout.flush()
        except OSError as exc:
            raise TerminalError(f"Cannot write to terminal: {exc}") from exc

    def size(self) -> tuple[int, int]:
        return terminal_size(self.stdout)

    def read_keys(self, timeout: float) -> list[Key]:
        """Wait up to ``timeout`` seconds for input and return the keys read."""
        fd = self.stdin.fileno()
        ready, _, _ = select.select([fd], [], [], timeout)
        if not ready:
            return []
        data = os.read(fd, 64).decode("utf-8", errors="ignore")
        return parse_keys(data)
