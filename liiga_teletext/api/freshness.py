"""TTL selection shared by the HTTP body cache and the domain caches.

A body is cached for no longer than the domain entry built from it would be
considered fresh.
"""

from __future__ import annotations

from datetime import datetime

from ..constants import (
    COMPLETED_GAME_TTL_SECONDS,
    LIVE_GAME_TTL_SECONDS,
    STARTING_GAME_TTL_SECONDS,
    STARTING_SOON_AFTER_SECONDS,
    STARTING_SOON_BEFORE_SECONDS,
)
from ..models import DetailedGameResponse, ScheduleApiGame, ScheduleGame, ScheduleResponse
from ..utils.datetime_utils import parse_timestamp


def game_ttl(started: bool, ended: bool, start: str, now: datetime) -> float:
    """Preferred cache lifetime of one game's data."""
    if started and not ended:
        return LIVE_GAME_TTL_SECONDS
    if ended:
        return COMPLETED_GAME_TTL_SECONDS
    start_at = parse_timestamp(start)
    if start_at is None:
        return STARTING_GAME_TTL_SECONDS
    seconds_to_start = (start_at - now).total_seconds()
    if -STARTING_SOON_AFTER_SECONDS <= seconds_to_start <= STARTING_SOON_BEFORE_SECONDS:
        return STARTING_GAME_TTL_SECONDS
    if seconds_to_start < 0:
        # Past its start time but not flagged started yet
        return STARTING_GAME_TTL_SECONDS
    until_window = seconds_to_start - STARTING_SOON_BEFORE_SECONDS
    return max(STARTING_GAME_TTL_SECONDS, min(COMPLETED_GAME_TTL_SECONDS, until_window))


def games_ttl(games: list[ScheduleGame] | list[ScheduleApiGame], now: datetime) -> float:
    if not games:
        return COMPLETED_GAME_TTL_SECONDS
    return min(game_ttl(game.started, game.ended, game.start, now) for game in games)


def schedule_response_ttl(response: ScheduleResponse, now: datetime) -> float:
    return games_ttl(response.games, now)


def detailed_game_ttl(response: DetailedGameResponse, now: datetime) -> float:
    game = response.game
    return game_ttl(game.started, game.ended, game.start, now)
