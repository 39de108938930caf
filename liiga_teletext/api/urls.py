"""URL builders for the Liiga API endpoints."""

from __future__ import annotations


def build_tournament_url(api_domain: str, tournament: str, date: str) -> str:
    """Games-by-date listing."""
    return f"{api_domain}/games?tournament={tournament}&date={date}"


def build_game_url(api_domain: str, season: int, game_id: int) -> str:
    """Single game detail with rosters."""
    return f"{api_domain}/games/{season}/{game_id}"


def build_tournament_schedule_url(api_domain: str, tournament: str, season: int) -> str:
    """Whole-season schedule; used for past seasons and finished playoffs."""
    return f"{api_domain}/schedule?tournament={tournament}&week=1&season={season}"
