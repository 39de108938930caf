"""Game status and the small formatting helpers built on it."""

from __future__ import annotations

from ..constants import MAX_GAME_MINUTE, MAX_TEAM_NAME_LENGTH, UNKNOWN_TEAM_NAME
from ..errors import DateParseError
from ..logging import logger
from ..models import GameData, ScheduleGame, ScheduleTeam, ScoreType
from ..utils.datetime_utils import parse_timestamp
from ..utils.parsing import truncate

OVERTIME_FINISH = "ENDED_DURING_EXTENDED_GAME_TIME"
SHOOTOUT_FINISH = "ENDED_DURING_WINNING_SHOT_COMPETITION"

OVERTIME_SUFFIX = " ja"
SHOOTOUT_SUFFIX = " rl"


def determine_game_status(game: ScheduleGame) -> tuple[ScoreType, bool, bool]:
    """Return ``(score_type, is_overtime, is_shootout)``."""
    is_overtime = game.finished_type == OVERTIME_FINISH
    is_shootout = game.finished_type == SHOOTOUT_FINISH
    if not game.started:
        score_type = ScoreType.SCHEDULED
    elif not game.ended:
        score_type = ScoreType.ONGOING
        logger.debug("ongoing_game", game_id=game.id, game_time=game.game_time)
    else:
        score_type = ScoreType.FINAL
    return score_type, is_overtime, is_shootout


def format_time(timestamp: str) -> str:
    """Local start time as ``HH.MM``."""
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        raise DateParseError(f"Invalid timestamp '{timestamp}'")
    return parsed.astimezone().strftime("%H.%M")


def format_played_time(seconds: int) -> str:
    """Elapsed game clock as ``MM:SS``."""
    seconds = max(seconds, 0)
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def format_result(home_goals: int, away_goals: int) -> str:
    return f"{home_goals}-{away_goals}"


def score_display(game: GameData) -> str:
    """Score text for the page: empty for scheduled games, suffixed ``ja``/``rl`` when decided late."""
    if game.score_type is ScoreType.SCHEDULED:
        return ""
    text = game.result
    if game.score_type is ScoreType.FINAL:
        if game.is_shootout:
            text += SHOOTOUT_SUFFIX
        elif game.is_overtime:
            text += OVERTIME_SUFFIX
    return text


def team_display_name(team: ScheduleTeam) -> str:
    name = (team.team_name or team.team_placeholder or "").strip()
    if not name:
        return UNKNOWN_TEAM_NAME
    return truncate(name, MAX_TEAM_NAME_LENGTH)


def clamp_minute(game_time: int) -> int:
    return max(0, min(MAX_GAME_MINUTE, game_time // 60))
