"""Tests for player-name formatting and team-scoped disambiguation."""

from __future__ import annotations

import pytest

from liiga_teletext.models import Player
from liiga_teletext.players import (
    DisambiguationContext,
    RosterName,
    create_fallback_name,
    disambiguate,
    extract_first_chars,
    extract_first_initial,
    format_for_display,
)
from liiga_teletext.processors.goal_events import build_context


def names(*triples: tuple[int, str, str]) -> list[RosterName]:
    return [RosterName(player_id, first, last) for player_id, first, last in triples]


@pytest.mark.parametrize(
    "first_name,expected",
    [
        ("Mikko", "M"),
        ("mikko", "M"),
        ("Äkäslompolo", "Ä"),
        ("A\u0308ksel", "Ä"),  # decomposed umlaut
        ("Jean-Pierre", "J"),
        ("O'Connor", "O"),
        ("  Saku", "S"),
        ("", None),
        ("   ", None),
        ("😀Mikko", None),
        ("1Mikko", None),
        ("-Pierre", None),
    ],
)
def test_extract_first_initial(first_name: str, expected: str | None) -> None:
    assert extract_first_initial(first_name) == expected


class TestExtractFirstChars:
    """Tests for extract_first_chars."""

    def test_two_letters(self):
        assert extract_first_chars("Mikael", 2) == "Mi"

    def test_stops_at_hyphen(self):
        assert extract_first_chars("Jo-Ville", 3) == "Jo"

    def test_short_name(self):
        assert extract_first_chars("Li", 3) == "Li"

    def test_length_is_clamped(self):
        assert extract_first_chars("Markus", 0) == "M"
        assert extract_first_chars("Markus", 9) == "Mar"

    def test_rest_is_lower_case(self):
        assert extract_first_chars("MIKAEL", 2) == "Mi"


class TestFormatForDisplay:
    """Tests for format_for_display."""

    def test_last_token_capitalized(self):
        assert format_for_display("mikko KOIVU") == "Koivu"

    def test_single_name(self):
        assert format_for_display("selänne") == "Selänne"

    def test_empty(self):
        assert format_for_display("   ") == ""

    def test_fallback_name(self):
        assert create_fallback_name(42) == "Pelaaja 42"


class TestDisambiguate:
    """Tests for disambiguate."""

    def test_two_koivus(self):
        """Different initials are enough."""
        result = disambiguate(names((1, "Mikko", "Koivu"), (2, "Saku", "Koivu")))
        assert result == {1: "Koivu M.", 2: "Koivu S."}

    def test_granlunds_need_two_letters(self):
        """Shared initial falls through to two letters."""
        result = disambiguate(names((1, "Mikael", "Granlund"), (2, "Markus", "Granlund")))
        assert result == {1: "Granlund Mi.", 2: "Granlund Ma."}

    def test_three_letters(self):
        result = disambiguate(names((1, "Mikko", "Koivu"), (2, "Mitja", "Koivu")))
        assert result == {1: "Koivu Mik.", 2: "Koivu Mit."}

    def test_unresolvable_falls_back_to_initial(self):
        """Same first three letters: both keep the single initial."""
        result = disambiguate(names((1, "Mikko", "Koivu"), (2, "Mikael", "Koivu")))
        assert result == {1: "Koivu M.", 2: "Koivu M."}

    def test_mixed_group(self):
        """Only the players sharing an initial get longer prefixes."""
        result = disambiguate(names((1, "Mikko", "Koivu"), (2, "Markus", "Koivu"), (3, "Saku", "Koivu")))
        assert result == {1: "Koivu Mi.", 2: "Koivu Ma.", 3: "Koivu S."}

    def test_unique_last_name_stays_plain(self):
        result = disambiguate(names((1, "Teemu", "Selänne"), (2, "Saku", "Koivu")))
        assert result == {1: "Selänne", 2: "Koivu"}

    def test_player_without_initial_keeps_last_name(self):
        result = disambiguate(names((1, "", "Koivu"), (2, "Saku", "Koivu")))
        assert result == {1: "Koivu", 2: "Koivu S."}

    def test_last_names_compare_case_insensitively(self):
        result = disambiguate(names((1, "Mikko", "Koivu"), (2, "Saku", "KOIVU")))
        assert result == {1: "Koivu M.", 2: "Koivu S."}

    def test_input_order_does_not_matter(self):
        roster = names((1, "Mikael", "Granlund"), (2, "Markus", "Granlund"), (3, "Saku", "Koivu"))
        assert disambiguate(roster) == disambiguate(list(reversed(roster)))


class TestDisambiguationContext:
    """Tests for DisambiguationContext."""

    def test_inactive_players_are_ignored(self):
        """A benched namesake does not force a suffix."""
        players = [
            Player(id=1, first_name="Mikko", last_name="Koivu", line=1),
            Player(id=2, first_name="Saku", last_name="Koivu", line=None),
        ]
        context = build_context(players, [])

        assert context.display_name(1) == "Koivu"
        assert 2 not in context

    def test_disambiguated_flag(self):
        context = DisambiguationContext(names((1, "Mikko", "Koivu"), (2, "Saku", "Koivu"), (3, "Teemu", "Selänne")))

        assert context.is_disambiguated(1) is True
        assert context.is_disambiguated(3) is False
        assert context.last_name(1) == "Koivu"
        assert context.display_name(99) is None

    def test_teams_are_independent(self):
        """Same last name on opposing teams is not disambiguated."""
        home = DisambiguationContext(names((1, "Mikko", "Koivu")))
        away = DisambiguationContext(names((2, "Saku", "Koivu")))
        assert home.display_name(1) == "Koivu"
        assert away.display_name(2) == "Koivu"
