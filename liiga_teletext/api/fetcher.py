"""
Fetch orchestration: from a requested date to the games shown on the page.

``fetch_liiga_data`` picks the date (before noon it is still yesterday),
routes finished seasons and past playoffs to the season-schedule endpoint,
otherwise reads the games-by-date listings of the active tournaments. When
the date has no games the nearest next game date is shown instead.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from ..constants import PLAYER_FETCH_THRESHOLD
from ..errors import DateParseError, LiigaError
from ..logging import logger
from ..models import (
    DetailedGameResponse,
    FetchResult,
    GameData,
    GoalEventData,
    Player,
    ScheduleApiGame,
    ScheduleGame,
    ScheduleResponse,
    ScheduleTeam,
    Tournament,
)
from ..processors import (
    build_goal_events,
    determine_game_status,
    format_time,
    team_display_name,
    unresolved_scorer_ids,
)
from ..processors.game_status import format_result
from ..utils.datetime_utils import local_date_of, parse_api_date, shift_date
from .freshness import detailed_game_ttl
from .season import DatePolicy, EndpointChoice, determine_fetch_date, is_previous_season, resolve_date_policy
from .tournaments import (
    best_next_game_date,
    determine_active_tournaments,
    fetch_season_schedule,
    fetch_tournaments_for_date,
)
from .urls import build_game_url

if TYPE_CHECKING:
    from ..context import AppContext

# Days probed one by one when no listing names a next game date
FUTURE_PROBE_DAYS = 7

PREVIOUS_SEARCH_DAYS = 30
NEXT_SEARCH_DAYS = 60
DATE_SEARCH_FETCH_TIMEOUT_SECONDS = 15
DATE_SEARCH_DELAY_SECONDS = 0.05


# ---------------------------------------------------------------------------
# Game detail and rosters
# ---------------------------------------------------------------------------


async def fetch_game_detail(
    context: AppContext, season: int, game_id: int, *, timeout_seconds: float | None = None
) -> DetailedGameResponse:
    """Detailed game with rosters; the rosters are also stored in the player cache."""
    cached = await context.cache.get_detailed_game(season, game_id)
    if cached is not None:
        return cached
    url = build_game_url(context.api_domain, season, game_id)
    response = await context.client.fetch(
        url,
        DetailedGameResponse,
        lambda payload: detailed_game_ttl(payload, context.clock.now()),
        timeout_seconds=timeout_seconds,
    )
    await context.cache.put_detailed_game(season, game_id, response)
    await store_rosters(context, response)
    return response


async def store_rosters(context: AppContext, response: DetailedGameResponse) -> None:
    season = response.game.season
    for team, players in (
        (response.game.home_team, response.home_team_players),
        (response.game.away_team, response.away_team_players),
    ):
        if team.team_id and players:
            await context.cache.put_players(season, team.team_id, players)


async def fetch_rosters_for_game(context: AppContext, season: int, game_id: int) -> None:
    """Background job: load rosters, then drop the game's goal events so they are rebuilt."""
    await fetch_game_detail(context, season, game_id, timeout_seconds=context.settings.api_fetch_timeout_seconds)
    await context.cache.goal_events.remove((season, game_id))


async def _cached_rosters(context: AppContext, game: ScheduleGame) -> tuple[list[Player] | None, list[Player] | None]:
    rosters: list[list[Player] | None] = []
    for team in (game.home_team, game.away_team):
        rosters.append(await context.cache.get_players(game.season, team.team_id) if team.team_id else None)
    return rosters[0], rosters[1]


# ---------------------------------------------------------------------------
# Game processing
# ---------------------------------------------------------------------------


async def resolve_goal_events(context: AppContext, game: ScheduleGame) -> list[GoalEventData]:
    """Goal events for one game, reusing the goal-events cache until the score moves."""
    if not game.started:
        return []
    score = (game.home_team.goals, game.away_team.goals)
    record = await context.cache.get_goal_events_record(game.season, game.id)
    if record is not None and record.last_known_score is not None and record.last_known_score != score:
        await context.cache.clear_goal_events(game.season, game.id, new_score=score)
    else:
        cached = await context.cache.get_goal_events(game.season, game.id)
        if cached is not None:
            return list(cached)

    home_players, away_players = await _cached_rosters(context, game)
    missing = unresolved_scorer_ids(game, home_players, away_players)
    if missing:
        if len(missing) > PLAYER_FETCH_THRESHOLD and context.player_queue is not None:
            queued = context.player_queue.submit(game.season, game.id)
            logger.info("roster_fetch_deferred", game_id=game.id, missing=len(missing), queued=queued)
        else:
            try:
                detail = await fetch_game_detail(
                    context, game.season, game.id, timeout_seconds=context.settings.api_fetch_timeout_seconds
                )
                home_players, away_players = detail.home_team_players, detail.away_team_players
            except LiigaError as exc:
                logger.warning("roster_fetch_failed", game_id=game.id, error=str(exc))

    events = build_goal_events(game, home_players, away_players)
    await context.cache.put_goal_events(game.season, game.id, events, is_live=game.is_live, score=score)
    return events


async def process_game(context: AppContext, game: ScheduleGame) -> GameData:
    score_type, is_overtime, is_shootout = determine_game_status(game)
    try:
        start_time = format_time(game.start)
    except DateParseError:
        logger.warning("bad_game_start", game_id=game.id, start=game.start)
        start_time = ""
    events = await resolve_goal_events(context, game)
    return GameData(
        home_team=team_display_name(game.home_team),
        away_team=team_display_name(game.away_team),
        time=start_time,
        result=format_result(game.home_team.goals, game.away_team.goals),
        score_type=score_type,
        is_overtime=is_overtime,
        is_shootout=is_shootout,
        serie=Tournament.from_api(game.serie),
        goal_events=tuple(events),
        played_time=game.game_time,
        start=game.start,
        game_id=game.id,
        season=game.season,
    )


async def process_games(context: AppContext, responses: Iterable[ScheduleResponse]) -> list[GameData]:
    games = [game for response in responses for game in response.games]
    return list(await asyncio.gather(*(process_game(context, game) for game in games)))


# ---------------------------------------------------------------------------
# Historical dates
# ---------------------------------------------------------------------------


def schedule_game_from_detail(detail: DetailedGameResponse, tournament: Tournament) -> ScheduleGame:
    """Listing-shaped game built from the detail endpoint, for the schedule route."""
    game = detail.game
    teams = [
        ScheduleTeam(
            team_id=team.team_id,
            team_name=team.team_name,
            goals=team.goals,
            goal_events=team.goal_events,
        )
        for team in (game.home_team, game.away_team)
    ]
    return ScheduleGame(
        id=game.id,
        season=game.season,
        start=game.start,
        end=game.end,
        home_team=teams[0],
        away_team=teams[1],
        finished_type=game.finished_type,
        started=game.started,
        ended=game.ended,
        game_time=game.game_time,
        serie=tournament.value,
    )


async def fetch_historical_games(context: AppContext, date: str, policy: DatePolicy) -> list[GameData]:
    """Games of ``date`` taken from the season schedules of its tournaments."""
    target = parse_api_date(date)
    results = await asyncio.gather(
        *(fetch_season_schedule(context, tournament, policy.season) for tournament in policy.tournaments),
        return_exceptions=True,
    )
    matching: list[ScheduleApiGame] = []
    errors: list[LiigaError] = []
    for tournament, result in zip(policy.tournaments, results):
        if isinstance(result, LiigaError):
            logger.warning("season_schedule_failed", tournament=tournament.value, season=policy.season, error=str(result))
            errors.append(result)
        elif isinstance(result, BaseException):
            raise result
        else:
            matching.extend(game for game in result.games if local_date_of(game.start) == target)
    if errors and len(errors) == len(policy.tournaments):
        raise errors[0]
    logger.info("historical_games_found", date=date, count=len(matching))

    details = await asyncio.gather(
        *(fetch_game_detail(context, game.season, game.id) for game in matching),
        return_exceptions=True,
    )
    games: list[GameData] = []
    for api_game, detail in zip(matching, details):
        if isinstance(detail, LiigaError):
            logger.warning("historical_game_skipped", game_id=api_game.id, error=str(detail))
            continue
        if isinstance(detail, BaseException):
            raise detail
        schedule_game = schedule_game_from_detail(detail, Tournament.from_serie_number(api_game.serie))
        games.append(await process_game(context, schedule_game))
    return games


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def _probe_following_days(
    context: AppContext, tournaments: Sequence[Tournament], date: str
) -> tuple[list[ScheduleResponse], str | None]:
    for offset in range(1, FUTURE_PROBE_DAYS + 1):
        day = shift_date(date, offset)
        responses, _ = await fetch_tournaments_for_date(context, tournaments, day)
        found = [response for response in responses.values() if response.games]
        if found:
            logger.info("future_games_found_by_probe", date=day)
            return found, day
    return [], None


async def _next_games(
    context: AppContext,
    tournaments: Sequence[Tournament],
    responses: dict[Tournament, ScheduleResponse],
    date: str,
) -> tuple[list[ScheduleResponse], str | None]:
    next_date, playing = best_next_game_date(responses, date)
    if next_date is not None and next_date > date:
        fetched, _ = await fetch_tournaments_for_date(context, playing, next_date)
        found = [response for response in fetched.values() if response.games]
        if found:
            return found, next_date
    return await _probe_following_days(context, tournaments, date)


async def fetch_liiga_data(
    context: AppContext,
    custom_date: str | None = None,
    *,
    current_games: Sequence[GameData] | None = None,
    now: datetime | None = None,
) -> FetchResult:
    """Games to show for ``custom_date`` (or today) and the date they belong to.

    ``current_games`` are the games on screen; listings whose live state no
    longer matches them are refetched.
    """
    current = now or context.clock.now().astimezone()
    date, is_pre_noon = determine_fetch_date(custom_date, current)
    policy = resolve_date_policy(date, current)
    logger.info("fetch_started", date=date, endpoint=policy.endpoint.value, pre_noon=is_pre_noon)

    if policy.endpoint is EndpointChoice.SEASON_SCHEDULE:
        games = await fetch_historical_games(context, date, policy)
        return FetchResult(games=games, date=date, is_historical=policy.is_historical)

    active, prefetched = await determine_active_tournaments(context, date, current_games)
    responses = {tournament: prefetched[tournament] for tournament in active if tournament in prefetched}
    missing = [tournament for tournament in active if tournament not in responses]
    if missing:
        fetched, errors = await fetch_tournaments_for_date(context, missing, date, current_games)
        responses.update(fetched)
        if not responses and errors:
            raise errors[0]

    with_games = [responses[tournament] for tournament in active if tournament in responses and responses[tournament].games]
    if with_games:
        games = await process_games(context, with_games)
        logger.info("fetch_finished", date=date, games=len(games))
        return FetchResult(games=games, date=date)

    logger.info("no_games_for_date", date=date, pre_noon=is_pre_noon)
    found, next_date = await _next_games(context, active, {**prefetched, **responses}, date)
    if not found or next_date is None:
        return FetchResult(games=[], date=date)
    games = await process_games(context, found)
    logger.info("fetch_finished", date=next_date, games=len(games), future=True)
    return FetchResult(games=games, date=next_date, is_future=True)


# ---------------------------------------------------------------------------
# Date navigation and season countdown
# ---------------------------------------------------------------------------


async def find_date_with_games(
    context: AppContext, start: str, direction: int, *, now: datetime | None = None
) -> str | None:
    """First date before (``direction < 0``) or after ``start`` that has games.

    Looks back at most ``PREVIOUS_SEARCH_DAYS`` and never into an earlier
    season; looks ahead at most ``NEXT_SEARCH_DAYS``. A date whose fetch fails
    or times out is skipped.
    """
    current = now or context.clock.now().astimezone()
    step = -1 if direction < 0 else 1
    limit = PREVIOUS_SEARCH_DAYS if step < 0 else NEXT_SEARCH_DAYS
    logger.info("date_search_started", start=start, direction=step)
    for offset in range(1, limit + 1):
        day = shift_date(start, step * offset)
        if step < 0 and is_previous_season(day, current):
            logger.info("date_search_season_boundary", date=day)
            break
        try:
            result = await asyncio.wait_for(
                fetch_liiga_data(context, day, now=current), timeout=DATE_SEARCH_FETCH_TIMEOUT_SECONDS
            )
        except LiigaError as exc:
            logger.warning("date_search_fetch_failed", date=day, error=str(exc))
        except asyncio.TimeoutError:
            logger.warning("date_search_fetch_timeout", date=day)
        else:
            if result.games and result.date == day:
                logger.info("date_search_found", date=day, days=offset)
                return day
        await context.clock.sleep(DATE_SEARCH_DELAY_SECONDS)
    logger.info("date_search_exhausted", start=start, direction=step)
    return None


async def days_until_regular_season(context: AppContext, *, now: datetime | None = None) -> int | None:
    """Days until the first regular-season game, or ``None`` once it has started or is unknown."""
    current = now or context.clock.now().astimezone()
    today = current.date()
    for season in (current.year, current.year + 1):
        try:
            schedule = await fetch_season_schedule(context, Tournament.REGULAR_SEASON, season)
        except LiigaError as exc:
            logger.warning("season_start_unavailable", season=season, error=str(exc))
            return None
        starts = [day for day in (local_date_of(game.start) for game in schedule.games) if day is not None]
        if not starts:
            continue
        days = (min(starts) - today).days
        if days > 0:
            logger.debug("season_countdown", season=season, days=days)
            return days
    return None
