"""Small parsing helpers shared by the fetch and render layers."""

from __future__ import annotations


def parse_int(value: str | int | float | None) -> int | None:
    """Parse a value to an integer, handling common edge cases.

    Accepts strings, ints, floats, or None. Returns None for empty strings or "-".
    """
    if value in (None, "", "-"):
        return None
    try:
        return int(float(value))
    except (ValueError, TypeError):
        return None


def truncate(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` characters without splitting a character."""
    if max_length <= 0:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length]
