"""
Tournament listings: which tournaments are running, and where the next games are.

Listings are read through the tournament cache (with the starting-game and
live-state checks) and fetched through the shared HTTP client on a miss.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from ..cache import tournament_key
from ..errors import DateParseError, LiigaError
from ..logging import logger
from ..models import GameData, ScheduleResponse, SeasonSchedule, Tournament
from ..utils.datetime_utils import parse_api_date
from .freshness import games_ttl, schedule_response_ttl
from .season import tournaments_for_month
from .urls import build_tournament_schedule_url, build_tournament_url

if TYPE_CHECKING:
    from ..context import AppContext

# A regular-season next date this close wins over other tournaments
REGULAR_SEASON_PREFERENCE_DAYS = 7


def should_use_this_date(current_best: str | None, candidate: str, tournament: Tournament, baseline: str) -> bool:
    """Whether ``candidate`` should replace ``current_best`` as the next game date.

    Future dates beat past ones. Among future dates the earliest wins, except
    that a regular-season date within a week is always taken. Among past
    dates the latest wins.
    """
    if current_best is None:
        return True
    try:
        base = parse_api_date(baseline)
        cand = parse_api_date(candidate)
        best = parse_api_date(current_best)
    except DateParseError:
        if candidate == current_best and tournament is Tournament.REGULAR_SEASON:
            return True
        return candidate < current_best

    candidate_future = cand >= base
    best_future = best >= base
    if candidate_future != best_future:
        return candidate_future
    if candidate_future:
        if tournament is Tournament.REGULAR_SEASON and (cand - base).days <= REGULAR_SEASON_PREFERENCE_DAYS:
            return True
        return cand < best
    return cand > best


async def fetch_tournament_day(
    context: AppContext,
    tournament: Tournament,
    date: str,
    current_games: Sequence[GameData] | None = None,
) -> ScheduleResponse:
    """One tournament's games on ``date``, from cache when still fresh."""
    key = tournament_key(tournament.value, date)
    cached = await context.cache.get_tournament_with_start_check(key)
    if cached is not None and current_games is not None:
        shown = [game for game in current_games if game.serie is tournament]
        cached = await context.cache.get_tournament_with_live_check(key, shown)
    if cached is not None:
        logger.debug("tournament_cache_hit", key=key)
        return cached

    url = build_tournament_url(context.api_domain, tournament.value, date)
    response = await context.client.fetch(
        url, ScheduleResponse, lambda payload: schedule_response_ttl(payload, context.clock.now())
    )
    await context.cache.put_tournament(key, response)
    return response


async def fetch_tournaments_for_date(
    context: AppContext,
    tournaments: Iterable[Tournament],
    date: str,
    current_games: Sequence[GameData] | None = None,
) -> tuple[dict[Tournament, ScheduleResponse], list[LiigaError]]:
    """Fetch several listings concurrently; failures are returned, not raised."""
    tournaments = list(tournaments)
    results = await asyncio.gather(
        *(fetch_tournament_day(context, tournament, date, current_games) for tournament in tournaments),
        return_exceptions=True,
    )
    responses: dict[Tournament, ScheduleResponse] = {}
    errors: list[LiigaError] = []
    for tournament, result in zip(tournaments, results):
        if isinstance(result, LiigaError):
            logger.info("tournament_fetch_failed", tournament=tournament.value, date=date, error=str(result))
            errors.append(result)
        elif isinstance(result, BaseException):
            raise result
        else:
            responses[tournament] = result
    return responses, errors


def month_of(date: str) -> int:
    return parse_api_date(date).month


async def determine_active_tournaments(
    context: AppContext, date: str, current_games: Sequence[GameData] | None = None
) -> tuple[list[Tournament], dict[Tournament, ScheduleResponse]]:
    """Tournaments with games on ``date`` or a next game date on or after it.

    Returns the active list (regular season when nothing is active) and the
    listings fetched along the way. When every listing fails the first
    error is raised.
    """
    candidates = tournaments_for_month(month_of(date))
    responses, errors = await fetch_tournaments_for_date(context, candidates, date, current_games)
    if not responses and errors:
        logger.error("active_tournaments_failed", date=date, candidates=[t.value for t in candidates])
        raise errors[0]

    baseline = parse_api_date(date)
    active: list[Tournament] = []
    for tournament in candidates:
        response = responses.get(tournament)
        if response is None:
            continue
        if response.games:
            active.append(tournament)
            continue
        if response.next_game_date:
            try:
                if parse_api_date(response.next_game_date) >= baseline:
                    active.append(tournament)
            except DateParseError:
                logger.debug("bad_next_game_date", tournament=tournament.value, value=response.next_game_date)
    if not active:
        active = [Tournament.REGULAR_SEASON]
    logger.info("active_tournaments", date=date, tournaments=[t.value for t in active])
    return active, responses


def best_next_game_date(responses: dict[Tournament, ScheduleResponse], date: str) -> tuple[str | None, list[Tournament]]:
    """Pick the best ``nextGameDate`` and the tournaments that play on it."""
    best: str | None = None
    for tournament, response in responses.items():
        candidate = response.next_game_date
        if candidate and should_use_this_date(best, candidate, tournament, date):
            best = candidate
    if best is None:
        return None, []
    playing = [t for t, response in responses.items() if response.next_game_date == best]
    return best, sorted(playing, key=lambda t: t.priority)


async def fetch_season_schedule(context: AppContext, tournament: Tournament, season: int) -> SeasonSchedule:
    """A whole season's schedule for one tournament, annotated with its serie number."""
    url = build_tournament_schedule_url(context.api_domain, tournament.value, season)
    schedule = await context.client.fetch(
        url, SeasonSchedule, lambda payload: games_ttl(payload.games, context.clock.now())
    )
    annotated = [game.model_copy(update={"serie": tournament.serie_number}) for game in schedule.games]
    return SeasonSchedule(annotated)
