"""Turn API payloads into page-ready game records."""

from .game_status import determine_game_status, format_played_time, format_time, score_display, team_display_name
from .goal_events import build_goal_events, process_goal_events, unresolved_scorer_ids
from .player_queue import PlayerFetchQueue

__all__ = [
    "PlayerFetchQueue",
    "build_goal_events",
    "determine_game_status",
    "format_played_time",
    "format_time",
    "process_goal_events",
    "score_display",
    "team_display_name",
    "unresolved_scorer_ids",
]
