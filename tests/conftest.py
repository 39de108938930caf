"""Shared pytest fixtures and configuration."""

from __future__ import annotations

import asyncio
import os
import time
from datetime import datetime, timedelta, timezone

import httpx
import pytest

# Local time is UTC in tests so start times format predictably
os.environ["TZ"] = "UTC"
time.tzset()

# Set required environment variables before any imports
os.environ.setdefault("LIIGA_API_DOMAIN", "https://liiga.example.com")

from liiga_teletext.config import get_settings, load_settings  # noqa: E402
from liiga_teletext.context import AppContext  # noqa: E402
from liiga_teletext.models import GameData, GoalEventData, GoalType, ScoreType, Tournament  # noqa: E402
from liiga_teletext.utils.clock import Clock  # noqa: E402

API_DOMAIN = "https://liiga.example.com"
DEFAULT_NOW = datetime(2024, 1, 15, 18, 0, tzinfo=timezone.utc)


class ManualClock(Clock):
    """Clock that only moves when told to; ``sleep`` advances it instantly."""

    def __init__(self, start: datetime = DEFAULT_NOW) -> None:
        self.wall = start
        self.mono = 1000.0
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.mono

    def now(self) -> datetime:
        return self.wall

    def advance(self, seconds: float) -> None:
        self.mono += seconds
        self.wall += timedelta(seconds=seconds)

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.advance(seconds)
        await asyncio.sleep(0)


@pytest.fixture
def clock():
    """Manual clock starting at 2024-01-15 18:00 UTC."""
    return ManualClock()


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    """Point the config directory at a temporary location."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


@pytest.fixture
def settings(config_home):
    """Settings with the test API domain and no config file."""
    return load_settings(api_domain=API_DOMAIN)


# ---------------------------------------------------------------------------
# Wire payloads (camelCase, as the API sends them)
# ---------------------------------------------------------------------------


def _goal_payload(
    scorer_id: int,
    *,
    event_id: int,
    home_score: int,
    away_score: int,
    game_time: int = 600,
    period: int = 1,
    goal_types: list[str] | None = None,
    winning_goal: bool = False,
    video_clip_url: str | None = None,
    scorer: tuple[str, str] | None = None,
) -> dict:
    payload = {
        "scorerPlayerId": scorer_id,
        "logTime": "2024-01-15T17:10:00Z",
        "gameTime": game_time,
        "period": period,
        "eventId": event_id,
        "homeTeamScore": home_score,
        "awayTeamScore": away_score,
        "winningGoal": winning_goal,
        "goalTypes": goal_types or [],
        "assistantPlayerIds": [],
    }
    if video_clip_url:
        payload["videoClipUrl"] = video_clip_url
    if scorer is not None:
        first, last = scorer
        payload["scorerPlayer"] = {"playerId": scorer_id, "firstName": first, "lastName": last}
    return payload


def _game_payload(
    game_id: int = 1,
    *,
    season: int = 2024,
    start: str = "2024-01-15T16:30:00Z",
    home: str = "Tappara",
    away: str = "HIFK",
    home_id: str = "tappara",
    away_id: str = "hifk",
    home_goals: int = 0,
    away_goals: int = 0,
    home_events: list[dict] | None = None,
    away_events: list[dict] | None = None,
    started: bool = True,
    ended: bool = True,
    finished_type: str | None = "ENDED_DURING_REGULAR_GAME_TIME",
    game_time: int = 3600,
    serie: str = "runkosarja",
) -> dict:
    return {
        "id": game_id,
        "season": season,
        "start": start,
        "end": "2024-01-15T19:00:00Z" if ended else None,
        "homeTeam": {"teamId": home_id, "teamName": home, "goals": home_goals, "goalEvents": home_events or []},
        "awayTeam": {"teamId": away_id, "teamName": away, "goals": away_goals, "goalEvents": away_events or []},
        "finishedType": finished_type if ended else None,
        "started": started,
        "ended": ended,
        "gameTime": game_time if started else 0,
        "serie": serie,
    }


def _player_payload(player_id: int, first: str, last: str, *, line: int | None = 1) -> dict:
    return {"id": player_id, "firstName": first, "lastName": last, "line": line}


def _detail_payload(game: dict, home_players: list[dict], away_players: list[dict]) -> dict:
    detail_game = {key: value for key, value in game.items() if key != "serie"}
    return {
        "game": detail_game,
        "awards": [],
        "homeTeamPlayers": home_players,
        "awayTeamPlayers": away_players,
    }


@pytest.fixture
def goal_payload():
    """Build a raw goal event."""
    return _goal_payload


@pytest.fixture
def game_payload():
    """Build a raw games-by-date game."""
    return _game_payload


@pytest.fixture
def player_payload():
    """Build a raw roster entry."""
    return _player_payload


@pytest.fixture
def detail_payload():
    """Build a raw game-detail response around a game payload."""
    return _detail_payload


# ---------------------------------------------------------------------------
# Display records
# ---------------------------------------------------------------------------


def _goal_event(
    name: str = "Koivu",
    *,
    is_home: bool = True,
    minute: int = 10,
    home_score: int = 1,
    away_score: int = 0,
    goal_types: tuple[GoalType, ...] = (),
    winning: bool = False,
    video: str | None = None,
    raw_goal_types: tuple[str, ...] = (),
) -> GoalEventData:
    return GoalEventData(
        scorer_player_id=1,
        scorer_name=name,
        minute=minute,
        home_team_score=home_score,
        away_team_score=away_score,
        is_winning_goal=winning,
        goal_types=goal_types,
        is_home_team=is_home,
        video_clip_url=video,
        raw_goal_types=raw_goal_types,
    )


def _game_data(
    home: str = "Tappara",
    away: str = "HIFK",
    *,
    score_type: ScoreType = ScoreType.FINAL,
    result: str = "1-0",
    events: tuple[GoalEventData, ...] = (),
    is_overtime: bool = False,
    is_shootout: bool = False,
    serie: Tournament = Tournament.REGULAR_SEASON,
    start: str = "2024-01-15T16:30:00Z",
    time_text: str = "16.30",
    played_time: int = 0,
) -> GameData:
    return GameData(
        home_team=home,
        away_team=away,
        time=time_text,
        result=result,
        score_type=score_type,
        is_overtime=is_overtime,
        is_shootout=is_shootout,
        serie=serie,
        goal_events=events,
        played_time=played_time,
        start=start,
    )


@pytest.fixture
def goal_event():
    """Build a display goal event."""
    return _goal_event


@pytest.fixture
def game_data():
    """Build a display game record."""
    return _game_data


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


class Router:
    """MockTransport handler serving canned JSON per URL; anything else is a 404."""

    def __init__(self, routes: dict[str, object] | None = None) -> None:
        self.routes: dict[str, object] = dict(routes or {})
        self.requested: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)
        if url not in self.routes:
            return httpx.Response(404)
        payload = self.routes[url]
        if isinstance(payload, httpx.Response):
            return httpx.Response(payload.status_code, headers=payload.headers, content=payload.content)
        return httpx.Response(200, json=payload)


@pytest.fixture
def make_context(settings, clock):
    """Build an ``AppContext`` whose HTTP client talks to a ``Router``."""

    def factory(routes: dict[str, object] | None = None) -> tuple[AppContext, Router]:
        router = Router(routes)
        context = AppContext.create(settings, clock=clock, transport=httpx.MockTransport(router))
        return context, router

    return factory
