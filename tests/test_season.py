"""Tests for the season and date policy."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from liiga_teletext.api.season import (
    EndpointChoice,
    determine_fetch_date,
    is_historical_date,
    is_previous_season,
    resolve_date_policy,
    season_for_date,
    should_use_schedule_for_playoffs,
    tournaments_for_month,
)
from liiga_teletext.errors import DateParseError
from liiga_teletext.models import Tournament


def at(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


class TestDetermineFetchDate:
    """Tests for the noon cutoff."""

    def test_before_noon_shows_yesterday(self):
        assert determine_fetch_date(None, at(2024, 1, 15, 11, 59)) == ("2024-01-14", True)

    def test_noon_shows_today(self):
        assert determine_fetch_date(None, at(2024, 1, 15, 12, 0)) == ("2024-01-15", False)

    def test_cutoff_crosses_month(self):
        assert determine_fetch_date(None, at(2024, 3, 1, 8)) == ("2024-02-29", True)

    def test_custom_date_is_kept(self):
        """A requested date ignores the cutoff."""
        assert determine_fetch_date("2023-12-30", at(2024, 1, 15, 9)) == ("2023-12-30", False)

    def test_invalid_custom_date(self):
        with pytest.raises(DateParseError):
            determine_fetch_date("2024-13-01", at(2024, 1, 15))


@pytest.mark.parametrize(
    "requested,current,expected",
    [
        ("2023-12-01", at(2024, 1, 15), True),  # earlier year
        ("2024-01-10", at(2024, 1, 15), False),  # this season
        ("2024-02-01", at(2024, 1, 15), False),  # future
        ("2024-02-10", at(2024, 7, 1), True),  # off-season looking at last regular season
        ("2023-10-10", at(2024, 6, 1), True),
        ("2024-06-01", at(2024, 8, 10), True),  # August looking back at summer
        ("2024-09-20", at(2024, 10, 1), False),
    ],
)
def test_is_historical_date(requested: str, current: datetime, expected: bool) -> None:
    assert is_historical_date(requested, current) is expected


class TestScheduleForPlayoffs:
    """Tests for should_use_schedule_for_playoffs."""

    def test_finished_playoffs_in_off_season(self):
        assert should_use_schedule_for_playoffs("2024-04-10", at(2024, 7, 1)) is True

    def test_playoffs_during_next_season(self):
        assert should_use_schedule_for_playoffs("2024-04-10", at(2024, 10, 1)) is False

    def test_regular_season_month(self):
        assert should_use_schedule_for_playoffs("2024-02-10", at(2024, 7, 1)) is False


class TestDatePolicy:
    """Tests for resolve_date_policy."""

    def test_current_date_uses_games_endpoint(self):
        policy = resolve_date_policy("2024-01-15", at(2024, 1, 15))
        assert policy.endpoint is EndpointChoice.GAMES_BY_DATE
        assert policy.tournaments == (Tournament.REGULAR_SEASON,)
        assert policy.is_historical is False

    def test_past_playoffs_use_schedule(self):
        policy = resolve_date_policy("2024-04-10", at(2024, 7, 1))
        assert policy.endpoint is EndpointChoice.SEASON_SCHEDULE
        assert Tournament.PLAYOFFS in policy.tournaments
        assert policy.season == 2024

    def test_season_starts_in_september(self):
        assert season_for_date("2023-09-01") == 2024
        assert season_for_date("2024-04-30") == 2024


@pytest.mark.parametrize(
    "month,expected",
    [
        (1, (Tournament.REGULAR_SEASON,)),
        (9, (Tournament.PRESEASON, Tournament.REGULAR_SEASON)),
        (
            4,
            (Tournament.REGULAR_SEASON, Tournament.PLAYOFFS, Tournament.PLAYOUT, Tournament.QUALIFICATIONS),
        ),
        (
            5,
            (
                Tournament.PRESEASON,
                Tournament.REGULAR_SEASON,
                Tournament.PLAYOFFS,
                Tournament.PLAYOUT,
                Tournament.QUALIFICATIONS,
            ),
        ),
    ],
)
def test_tournaments_for_month(month: int, expected: tuple) -> None:
    assert tournaments_for_month(month) == expected


@pytest.mark.parametrize(
    "requested,current,expected",
    [
        ("2024-07-31", at(2024, 10, 1), True),
        ("2024-09-30", at(2024, 10, 1), False),
        ("2023-07-15", at(2024, 10, 1), True),
        ("2022-12-01", at(2024, 10, 1), True),
        ("2024-07-31", at(2024, 8, 15), False),
        ("2024-03-01", at(2024, 3, 15), False),
        ("not-a-date", at(2024, 10, 1), False),
    ],
)
def test_is_previous_season(requested: str, current: datetime, expected: bool) -> None:
    assert is_previous_season(requested, current) is expected
