"""
Team-scoped player-name disambiguation.

Within one team, players sharing a last name get the shortest first-name
prefix that tells them apart: ``Koivu M.`` / ``Koivu S.``, then two letters
(``Granlund Mi.`` / ``Granlund Ma.``), then three. If three letters still
collide the colliding players fall back to the single initial. A player with
no usable first-name letter keeps the plain last name.

The result only depends on the set of ``(id, first, last)`` triples; groups
are walked in sorted order so dict ordering never leaks into the output.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

from ..models import Player
from .formatting import extract_first_chars, extract_first_initial, format_for_display


@dataclass(frozen=True)
class RosterName:
    player_id: int
    first_name: str
    last_name: str

    @classmethod
    def from_player(cls, player: Player) -> RosterName:
        return cls(player.id, player.first_name, player.last_name)


def _with_suffix(last_name: str, suffix: str) -> str:
    return f"{last_name} {suffix}."


def _group_by(names: Iterable[RosterName], key) -> dict[str, list[RosterName]]:
    groups: dict[str, list[RosterName]] = defaultdict(list)
    for name in names:
        groups[key(name)].append(name)
    return groups


def _extended(members: list[RosterName], display_last: str, initial: str) -> dict[int, str]:
    """Try two, then three letters for players that share an initial."""
    result: dict[int, str] = {}
    by_two = _group_by(members, lambda n: extract_first_chars(n.first_name, 2) or initial)
    for two, group in sorted(by_two.items()):
        if len(group) == 1:
            result[group[0].player_id] = _with_suffix(display_last, two)
            continue
        for name in group:
            three = extract_first_chars(name.first_name, 3) or two
            result[name.player_id] = _with_suffix(display_last, three)
    return result


def _disambiguate_group(group: list[RosterName]) -> dict[int, str]:
    display_last = format_for_display(group[0].last_name)
    result: dict[int, str] = {}
    with_initial: list[tuple[str, RosterName]] = []
    for name in group:
        initial = extract_first_initial(name.first_name)
        if initial is None:
            result[name.player_id] = display_last
        else:
            with_initial.append((initial, name))

    by_initial: dict[str, list[RosterName]] = defaultdict(list)
    for initial, name in with_initial:
        by_initial[initial].append(name)

    for initial, members in sorted(by_initial.items()):
        if len(members) == 1:
            result[members[0].player_id] = _with_suffix(display_last, initial)
            continue
        extended = _extended(members, display_last, initial)
        if len(set(extended.values())) == len(members):
            result.update(extended)
        else:
            for name in members:
                result[name.player_id] = _with_suffix(display_last, initial)
    return result


def disambiguate(names: Iterable[RosterName]) -> dict[int, str]:
    """Map each player id to its display name within one team."""
    unique = {name.player_id: name for name in names}
    ordered = sorted(unique.values(), key=lambda n: n.player_id)
    groups = _group_by(ordered, lambda n: format_for_display(n.last_name).casefold())
    result: dict[int, str] = {}
    for _, group in sorted(groups.items()):
        if len(group) == 1:
            result[group[0].player_id] = format_for_display(group[0].last_name)
        else:
            result.update(_disambiguate_group(group))
    return result


class DisambiguationContext:
    """Display names for one team in one game."""

    def __init__(self, names: Iterable[RosterName]) -> None:
        names = list(names)
        self._last_only = {name.player_id: format_for_display(name.last_name) for name in names}
        self._display = disambiguate(names)

    def __contains__(self, player_id: int) -> bool:
        return player_id in self._display

    def display_name(self, player_id: int) -> str | None:
        return self._display.get(player_id)

    def last_name(self, player_id: int) -> str | None:
        return self._last_only.get(player_id)

    def is_disambiguated(self, player_id: int) -> bool:
        display = self._display.get(player_id)
        return display is not None and display != self._last_only.get(player_id)
