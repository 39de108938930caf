"""Wire and display models."""

from .game import FetchResult, GameData, GoalEventData, GoalType, ScoreType, Tournament
from .schedule import (
    DetailedGame,
    DetailedGameResponse,
    DetailedTeam,
    EmbeddedPlayer,
    GoalEvent,
    PenaltyEvent,
    Period,
    Player,
    ScheduleApiGame,
    ScheduleGame,
    ScheduleResponse,
    ScheduleTeam,
    SeasonSchedule,
)

__all__ = [
    "DetailedGame",
    "DetailedGameResponse",
    "DetailedTeam",
    "EmbeddedPlayer",
    "FetchResult",
    "GameData",
    "GoalEvent",
    "GoalEventData",
    "GoalType",
    "PenaltyEvent",
    "Period",
    "Player",
    "ScheduleApiGame",
    "ScheduleGame",
    "ScheduleResponse",
    "ScheduleTeam",
    "ScoreType",
    "SeasonSchedule",
    "Tournament",
]
