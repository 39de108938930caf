"""
Builds the page's goal events from a game's raw goal events and rosters.

Names are disambiguated per team. Within one game a disambiguated player's
first goal carries the first-name suffix and later goals show the last name
only. Events are merged into ``(period, game_time, event_id)`` order before
that rule is applied.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..constants import UNKNOWN_PLAYER_NAME
from ..logging import logger
from ..models import GoalEvent, GoalEventData, GoalType, Player, ScheduleGame, ScheduleTeam
from ..players import DisambiguationContext, RosterName, create_fallback_name
from .game_status import clamp_minute

# Missed shootout attempt / missed penalty shot
DROPPED_GOAL_TYPES = frozenset({"RL0", "VT0"})


def is_counted_goal(event: GoalEvent) -> bool:
    return not any(tag.strip().upper() in DROPPED_GOAL_TYPES for tag in event.goal_types)


def counted_goals(team: ScheduleTeam) -> list[GoalEvent]:
    return [event for event in team.goal_events if is_counted_goal(event)]


def build_context(players: Iterable[Player] | None, events: Iterable[GoalEvent]) -> DisambiguationContext:
    """Disambiguation context from the active roster plus embedded scorer records.

    A scorer record embedded in the listing is treated as an active player
    when the roster does not already hold that id.
    """
    names: dict[int, RosterName] = {}
    for player in players or ():
        if player.is_active:
            names[player.id] = RosterName.from_player(player)
    for event in events:
        embedded = event.scorer_player
        if embedded is not None and embedded.player_id not in names and embedded.last_name.strip():
            names[embedded.player_id] = RosterName(embedded.player_id, embedded.first_name, embedded.last_name)
    return DisambiguationContext(names.values())


def unresolved_scorer_ids(
    game: ScheduleGame,
    home_players: Sequence[Player] | None = None,
    away_players: Sequence[Player] | None = None,
) -> set[int]:
    """Scorer ids that neither the rosters nor the embedded records can name."""
    missing: set[int] = set()
    for team, players in ((game.home_team, home_players), (game.away_team, away_players)):
        events = counted_goals(team)
        context = build_context(players, events)
        missing.update(event.scorer_player_id for event in events if event.scorer_player_id not in context)
    return missing


def _to_display(event: GoalEvent, scorer_name: str, is_home_team: bool) -> GoalEventData:
    raw_types = tuple(tag.strip().upper() for tag in event.goal_types)
    return GoalEventData(
        scorer_player_id=event.scorer_player_id,
        scorer_name=scorer_name,
        minute=clamp_minute(event.game_time),
        home_team_score=event.home_team_score,
        away_team_score=event.away_team_score,
        is_winning_goal=event.winning_goal,
        goal_types=GoalType.parse_all(raw_types),
        is_home_team=is_home_team,
        video_clip_url=event.video_clip_url,
        period=event.period,
        game_time=event.game_time,
        event_id=event.event_id,
        raw_goal_types=raw_types,
    )


def process_goal_events(
    game: ScheduleGame,
    home_players: Sequence[Player] | None = None,
    away_players: Sequence[Player] | None = None,
) -> list[GoalEventData]:
    """Ordered goal events for ``game`` with team-scoped disambiguated names."""
    tagged: list[tuple[GoalEvent, bool, DisambiguationContext]] = []
    for team, players, is_home in (
        (game.home_team, home_players, True),
        (game.away_team, away_players, False),
    ):
        events = counted_goals(team)
        context = build_context(players, events)
        tagged.extend((event, is_home, context) for event in events)

    tagged.sort(key=lambda item: (item[0].period, item[0].game_time, item[0].event_id))

    shown_with_suffix: set[int] = set()
    result: list[GoalEventData] = []
    for event, is_home, context in tagged:
        player_id = event.scorer_player_id
        name = context.display_name(player_id)
        if name is None:
            name = create_fallback_name(player_id)
        elif context.is_disambiguated(player_id):
            if player_id in shown_with_suffix:
                name = context.last_name(player_id) or name
            else:
                shown_with_suffix.add(player_id)
        result.append(_to_display(event, name, is_home))
    return result


def placeholder_goal_events(game: ScheduleGame) -> list[GoalEventData]:
    """Stand-in events for a game that has a score but no goal events."""
    events: list[GoalEventData] = []
    for index in range(game.home_team.goals):
        events.append(_placeholder(home_score=index + 1, away_score=0, is_home_team=True))
    for index in range(game.away_team.goals):
        events.append(_placeholder(home_score=0, away_score=index + 1, is_home_team=False))
    if events:
        logger.warning(
            "placeholder_goal_events",
            game_id=game.id,
            score=f"{game.home_team.goals}-{game.away_team.goals}",
        )
    return events


def _placeholder(*, home_score: int, away_score: int, is_home_team: bool) -> GoalEventData:
    return GoalEventData(
        scorer_player_id=0,
        scorer_name=UNKNOWN_PLAYER_NAME,
        minute=0,
        home_team_score=home_score,
        away_team_score=away_score,
        is_winning_goal=False,
        goal_types=(),
        is_home_team=is_home_team,
    )


def build_goal_events(
    game: ScheduleGame,
    home_players: Sequence[Player] | None = None,
    away_players: Sequence[Player] | None = None,
) -> list[GoalEventData]:
    """Goal events for the page; placeholders when the listing carried none."""
    if not game.started:
        return []
    if not game.home_team.goal_events and not game.away_team.goal_events:
        return placeholder_goal_events(game)
    return process_goal_events(game, home_players, away_players)
