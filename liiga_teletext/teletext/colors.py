"""ANSI-256 palette for the teletext look, expressed as ``rich`` styles."""

from __future__ import annotations

from rich.cells import cell_len, set_cell_size
from rich.color import Color
from rich.style import Style

HEADER_BG = 21
HEADER_FG = 21
TITLE_BG = 46
SUBHEADER_FG = 46
RESULT_FG = 46
TEXT_FG = 231
SCORER_FG = 51
WINNING_GOAL_FG = 201
GOAL_TYPE_FG = 226
COUNTDOWN_FG = 226
WARNING_FG = 196


def style(foreground: int, background: int | None = None) -> Style:
    """Style for a palette foreground and optional background."""
    return Style(
        color=Color.from_ansi(foreground),
        bgcolor=Color.from_ansi(background) if background is not None else None,
    )


def truncate_to_width(text: str, width: int) -> str:
    """Cut ``text`` to at most ``width`` cells.

    A double-width character that would straddle the limit is dropped rather
    than split.
    """
    if width <= 0:
        return ""
    if cell_len(text) <= width:
        return text
    return set_cell_size(text, width).rstrip(" ")
