"""Pydantic models for the Liiga API wire format.

Field names are snake_case; the camelCase JSON names are aliases, so
``model_validate`` reads API payloads and ``model_dump(by_alias=True)``
writes them back unchanged.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, RootModel


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class EmbeddedPlayer(WireModel):
    player_id: int = Field(alias="playerId")
    last_name: str = Field("", alias="lastName")
    first_name: str = Field("", alias="firstName")


class GoalEvent(WireModel):
    scorer_player_id: int = Field(alias="scorerPlayerId")
    log_time: str = Field("", alias="logTime")
    game_time: int = Field(0, alias="gameTime")
    period: int = 0
    event_id: int = Field(0, alias="eventId")
    home_team_score: int = Field(0, alias="homeTeamScore")
    away_team_score: int = Field(0, alias="awayTeamScore")
    winning_goal: bool = Field(False, alias="winningGoal")
    goal_types: list[str] = Field(default_factory=list, alias="goalTypes")
    assistant_player_ids: list[int] = Field(default_factory=list, alias="assistantPlayerIds")
    video_clip_url: str | None = Field(None, alias="videoClipUrl")
    scorer_player: EmbeddedPlayer | None = Field(None, alias="scorerPlayer")


class ScheduleTeam(WireModel):
    team_id: str | None = Field(None, alias="teamId")
    team_placeholder: str | None = Field(None, alias="teamPlaceholder")
    team_name: str | None = Field(None, alias="teamName")
    goals: int = 0
    time_out: int | None = Field(None, alias="timeOut")
    powerplay_instances: int = Field(0, alias="powerplayInstances")
    powerplay_goals: int = Field(0, alias="powerplayGoals")
    short_handed_instances: int = Field(0, alias="shortHandedInstances")
    short_handed_goals: int = Field(0, alias="shortHandedGoals")
    ranking: int | None = None
    game_start_date_time: str | None = Field(None, alias="gameStartDateTime")
    goal_events: list[GoalEvent] = Field(default_factory=list, alias="goalEvents")

    @property
    def identity(self) -> str | None:
        """Team id when present, otherwise the name."""
        return self.team_id or self.team_name


class ScheduleGame(WireModel):
    """One game as returned by the games-by-date endpoint.

    ``ended`` implies ``started``; the API is trusted on this and the status
    helpers never look at ``ended`` alone.
    """

    id: int
    season: int
    start: str
    end: str | None = None
    home_team: ScheduleTeam = Field(alias="homeTeam")
    away_team: ScheduleTeam = Field(alias="awayTeam")
    finished_type: str | None = Field(None, alias="finishedType")
    started: bool = False
    ended: bool = False
    game_time: int = Field(0, alias="gameTime")
    serie: str = "runkosarja"

    @property
    def is_live(self) -> bool:
        return self.started and not self.ended


class ScheduleResponse(WireModel):
    games: list[ScheduleGame] = Field(default_factory=list)
    previous_game_date: str | None = Field(None, alias="previousGameDate")
    next_game_date: str | None = Field(None, alias="nextGameDate")

    @property
    def has_live_games(self) -> bool:
        return any(game.is_live for game in self.games)


class ScheduleApiGame(WireModel):
    """Game row of the season-schedule endpoint (serie is an integer there)."""

    id: int
    season: int
    start: str
    end: str | None = None
    home_team_name: str = Field("", alias="homeTeamName")
    away_team_name: str = Field("", alias="awayTeamName")
    serie: int = 1
    finished_type: str | None = Field(None, alias="finishedType")
    started: bool = False
    ended: bool = False
    game_time: int | None = Field(None, alias="gameTime")


class SeasonSchedule(RootModel[list[ScheduleApiGame]]):
    """The season-schedule endpoint returns a bare JSON array."""

    @property
    def games(self) -> list[ScheduleApiGame]:
        return self.root


# ---------------------------------------------------------------------------
# Game detail endpoint
# ---------------------------------------------------------------------------


class Player(WireModel):
    """Roster entry. Only active players take part in name disambiguation."""

    id: int
    last_name: str = Field("", alias="lastName")
    first_name: str = Field("", alias="firstName")
    line: int | None = None
    injured: bool = False
    suspended: bool = False
    removed: bool = False

    @property
    def is_active(self) -> bool:
        return self.line is not None and not (self.injured or self.suspended or self.removed)


class Period(WireModel):
    index: int
    home_team_goals: int = Field(0, alias="homeTeamGoals")
    away_team_goals: int = Field(0, alias="awayTeamGoals")
    category: str = ""
    start_time: int = Field(0, alias="startTime")
    end_time: int = Field(0, alias="endTime")


class PenaltyEvent(WireModel):
    player_id: int = Field(alias="playerId")
    sufferer_player_id: int | None = Field(None, alias="suffererPlayerId")
    log_time: str = Field("", alias="logTime")
    game_time: int = Field(0, alias="gameTime")
    period: int = 0
    penalty_begintime: int = Field(0, alias="penaltyBegintime")
    penalty_endtime: int = Field(0, alias="penaltyEndtime")
    penalty_fault_name: str = Field("", alias="penaltyFaultName")
    penalty_fault_type: str = Field("", alias="penaltyFaultType")
    penalty_minutes: int = Field(0, alias="penaltyMinutes")


class DetailedTeam(WireModel):
    team_id: str | None = Field(None, alias="teamId")
    team_name: str | None = Field(None, alias="teamName")
    goals: int = 0
    goal_events: list[GoalEvent] = Field(default_factory=list, alias="goalEvents")
    penalty_events: list[PenaltyEvent] = Field(default_factory=list, alias="penaltyEvents")


class DetailedGame(WireModel):
    id: int
    season: int
    start: str
    end: str | None = None
    home_team: DetailedTeam = Field(alias="homeTeam")
    away_team: DetailedTeam = Field(alias="awayTeam")
    periods: list[Period] = Field(default_factory=list)
    finished_type: str | None = Field(None, alias="finishedType")
    started: bool = False
    ended: bool = False
    game_time: int = Field(0, alias="gameTime")
    serie: str = "runkosarja"

    @property
    def is_live(self) -> bool:
        return self.started and not self.ended


class DetailedGameResponse(WireModel):
    game: DetailedGame
    awards: list[Any] = Field(default_factory=list)
    home_team_players: list[Player] = Field(default_factory=list, alias="homeTeamPlayers")
    away_team_players: list[Player] = Field(default_factory=list, alias="awayTeamPlayers")
