"""Player-name formatting helpers."""

from __future__ import annotations

import unicodedata

from ..constants import FALLBACK_PLAYER_NAME, MAX_PLAYER_NAME_LENGTH

NAME_SEPARATORS = (" ", "-", "'")


def graphemes(text: str) -> list[str]:
    """Split ``text`` into base characters with their combining marks attached."""
    clusters: list[str] = []
    for char in unicodedata.normalize("NFC", text):
        if clusters and unicodedata.combining(char):
            clusters[-1] += char
        else:
            clusters.append(char)
    return clusters


def _capitalize(clusters: list[str]) -> str:
    if not clusters:
        return ""
    head, tail = clusters[0], clusters[1:]
    return head[0].upper() + head[1:] + "".join(tail).lower()


def format_for_display(full_name: str) -> str:
    """Last whitespace-separated token, first letter upper-case and the rest lower-case.

    ``"mikko KOIVU"`` -> ``"Koivu"``.
    """
    tokens = full_name.split()
    if not tokens:
        return ""
    return _capitalize(graphemes(tokens[-1][:MAX_PLAYER_NAME_LENGTH]))


def _leading_token(first_name: str) -> str:
    token = first_name.strip()
    for separator in NAME_SEPARATORS:
        token = token.split(separator, 1)[0]
    return token


def extract_first_chars(first_name: str, length: int) -> str | None:
    """The first ``length`` letters (1-3) of the first name's leading token.

    Returns None when the token does not start with a letter, so digits,
    emoji and a leading hyphen all yield no prefix.
    """
    length = max(1, min(3, length))
    clusters = graphemes(_leading_token(first_name))
    if not clusters or not clusters[0][0].isalpha():
        return None
    prefix: list[str] = []
    for cluster in clusters:
        if not cluster[0].isalpha() or len(prefix) == length:
            break
        prefix.append(cluster)
    return _capitalize(prefix)


def extract_first_initial(first_name: str) -> str | None:
    """``"Äkäslompolo"`` -> ``"Ä"``, ``"Jean-Pierre"`` -> ``"J"``, ``"1Mikko"`` -> None."""
    return extract_first_chars(first_name, 1)


def create_fallback_name(player_id: int) -> str:
    return FALLBACK_PLAYER_NAME.format(player_id=player_id)
