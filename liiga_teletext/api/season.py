"""
Season and date policy.

Decides which date the page shows, whether a date belongs to a finished
season, and which endpoint (games-by-date or season schedule) serves it.
All functions take the current local time as an argument.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum

from ..constants import PLAYOFFS_END_MONTH, PLAYOFFS_START_MONTH, PRESEASON_END_MONTH, PRESEASON_START_MONTH
from ..errors import DateParseError
from ..logging import logger
from ..models import Tournament
from ..utils.datetime_utils import format_api_date, now_local, parse_api_date
from ..utils.parsing import parse_int

NOON = time(12, 0)
OFF_SEASON_MONTHS = range(6, 9)
PAST_PLAYOFF_MONTHS = range(3, 6)
SUMMER_MONTHS = range(5, 8)


class EndpointChoice(str, Enum):
    GAMES_BY_DATE = "games_by_date"
    SEASON_SCHEDULE = "season_schedule"


@dataclass(frozen=True)
class DatePolicy:
    """Endpoint and candidate tournaments for one requested date."""

    endpoint: EndpointChoice
    tournaments: tuple[Tournament, ...]
    is_historical: bool
    season: int


def _year_month(value: str, current: datetime) -> tuple[int, int] | None:
    parts = value.split("-")
    if len(parts) < 2:
        return None
    year = parse_int(parts[0])
    month = parse_int(parts[1])
    return (year if year is not None else current.year, month if month is not None else current.month)


def _is_future(value: str, current: datetime) -> bool:
    try:
        return parse_api_date(value) > current.date()
    except DateParseError:
        return False


def season_for_date(value: str) -> int:
    """Hockey seasons start in September: ``2024-10-01`` belongs to season 2025."""
    day = parse_api_date(value)
    return day.year + 1 if day.month >= 9 else day.year


def is_historical_date(value: str, current: datetime | None = None) -> bool:
    """True when ``value`` belongs to a season that has already ended."""
    current = current or now_local()
    year_month = _year_month(value, current)
    if year_month is None or _is_future(value, current):
        return False
    year, month = year_month
    if year < current.year:
        return True
    if year == current.year:
        if current.month == 8 and month in SUMMER_MONTHS:
            return True
        if current.month in SUMMER_MONTHS and (month >= 9 or month <= 4):
            return True
    return False


def should_use_schedule_for_playoffs(value: str, current: datetime | None = None) -> bool:
    """Finished spring playoffs drop off the games-by-date endpoint during the off-season."""
    current = current or now_local()
    year_month = _year_month(value, current)
    if year_month is None or _is_future(value, current):
        return False
    year, month = year_month
    return year == current.year and current.month in OFF_SEASON_MONTHS and month in PAST_PLAYOFF_MONTHS


def is_previous_season(value: str, current: datetime | None = None) -> bool:
    """True when ``value`` lies before the season now being played.

    Date navigation stops here; older dates stay reachable with ``--date``.
    """
    current = current or now_local()
    year_month = _year_month(value, current)
    if year_month is None:
        return False
    year, month = year_month
    if year < current.year - 1:
        return True
    if year in (current.year, current.year - 1):
        return current.month >= 9 and month in OFF_SEASON_MONTHS
    return False


def should_show_todays_games(current: datetime | None = None) -> bool:
    """Before noon local time the page still shows yesterday's results."""
    current = current or now_local()
    return current.time() >= NOON


def determine_fetch_date(custom_date: str | None = None, current: datetime | None = None) -> tuple[str, bool]:
    """Return ``(date, is_pre_noon_cutoff)``.

    A custom date is validated and used as is.
    """
    if custom_date:
        parse_api_date(custom_date)
        return custom_date, False
    current = current or now_local()
    if should_show_todays_games(current):
        return format_api_date(current.date()), False
    yesterday = format_api_date(current.date() - timedelta(days=1))
    logger.info("pre_noon_cutoff", date=yesterday)
    return yesterday, True


def tournaments_for_month(month: int) -> tuple[Tournament, ...]:
    """Candidate tournaments in fetch priority order."""
    candidates: list[Tournament] = []
    if PRESEASON_START_MONTH <= month <= PRESEASON_END_MONTH:
        candidates.append(Tournament.PRESEASON)
    candidates.append(Tournament.REGULAR_SEASON)
    if PLAYOFFS_START_MONTH <= month <= PLAYOFFS_END_MONTH:
        candidates.extend([Tournament.PLAYOFFS, Tournament.PLAYOUT, Tournament.QUALIFICATIONS])
    return tuple(candidates)


def resolve_date_policy(value: str, current: datetime | None = None) -> DatePolicy:
    """Pick the endpoint and tournament candidates for ``value``."""
    current = current or now_local()
    day: date = parse_api_date(value)
    historical = is_historical_date(value, current)
    use_schedule = historical or should_use_schedule_for_playoffs(value, current)
    policy = DatePolicy(
        endpoint=EndpointChoice.SEASON_SCHEDULE if use_schedule else EndpointChoice.GAMES_BY_DATE,
        tournaments=tournaments_for_month(day.month),
        is_historical=historical,
        season=season_for_date(value),
    )
    logger.debug(
        "date_policy_resolved",
        date=value,
        endpoint=policy.endpoint.value,
        historical=historical,
        tournaments=[t.value for t in policy.tournaments],
    )
    return policy
