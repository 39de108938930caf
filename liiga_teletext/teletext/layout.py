"""
Column layout for game rows and goal-event lines.

All columns are 1-based within the region being drawn: the whole terminal
in normal mode, one 60-column half in wide mode. Goal lines read

    ``MM Name          ▶ YV IM``

with the minute at the side's start column, the name three columns later,
the play icon at ``play_icon_column`` and the goal types two columns after
it. The away side is the same line shifted by ``away_start - home_start``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from rich.cells import cell_len

from ..models import GameData, GoalType

CONTENT_MARGIN = 2
MIN_WIDTH = 50
NORMAL_PROFILE_WIDTH = 80

TEAM_WIDTH = 20
WIDE_SEPARATOR_WIDTH = 5
NARROW_SEPARATOR_WIDTH = 3
MIN_TEAM_WIDTH = 6

SCORE_WIDTH = 8  # "10-10 rl"
TIME_WIDTH = 5  # "19.30" or "59:59"
COLUMN_GAP = 2

MINUTE_WIDTH = 2
NAME_OFFSET = MINUTE_WIDTH + 1
TYPES_OFFSET = 2

MAX_PLAY_ICON_COLUMN = 43
MIN_PLAYER_NAME_WIDTH = 6
GOAL_TYPES_CAP = 8
WIDE_GOAL_TYPES_CAP = 6
WIDE_PLAYER_NAME_CAP = 15

WIDE_MODE_MIN_WIDTH = 128
WIDE_COLUMN_WIDTH = 60
WIDE_GAP = 8

COMPACT_COLUMN_WIDTH = 18
COMPACT_MAX_COLUMNS = 3


class DisplayMode(str, Enum):
    NORMAL = "normal"
    COMPACT = "compact"
    WIDE = "wide"


class DetailLevel(str, Enum):
    """How much room names get, by terminal width."""

    MINIMAL = "minimal"
    STANDARD = "standard"
    EXTENDED = "extended"

    @classmethod
    def for_width(cls, width: int) -> DetailLevel:
        if width >= 120:
            return cls.EXTENDED
        if width >= 100:
            return cls.STANDARD
        return cls.MINIMAL

    @property
    def player_name_cap(self) -> int:
        return {DetailLevel.MINIMAL: 12, DetailLevel.STANDARD: 17, DetailLevel.EXTENDED: 20}[self]


@dataclass(frozen=True)
class LayoutConfig:
    width: int
    home_team_width: int
    away_team_width: int
    separator_width: int
    max_player_name_width: int
    max_goal_types_width: int
    play_icon_column: int
    time_column: int
    score_column: int
    detail_level: DetailLevel = DetailLevel.MINIMAL

    @property
    def home_start(self) -> int:
        return CONTENT_MARGIN + 1

    @property
    def away_start(self) -> int:
        return self.home_start + self.home_team_width + self.separator_width

    @property
    def side_offset(self) -> int:
        return self.away_start - self.home_start

    @property
    def name_start(self) -> int:
        return self.home_start + NAME_OFFSET

    def icon_column(self, is_home_team: bool) -> int:
        return self.play_icon_column if is_home_team else self.play_icon_column + self.side_offset

    def types_column(self, is_home_team: bool) -> int:
        return self.icon_column(is_home_team) + TYPES_OFFSET


def fit_goal_types(goal_types: Sequence[GoalType], width: int) -> str:
    """Space-separated tags, dropping from the right until they fit; the first tag always stays."""
    tags = [goal_type.value for goal_type in goal_types]
    while len(tags) > 1 and len(" ".join(tags)) > width:
        tags.pop()
    return " ".join(tags)


def _team_geometry(width: int) -> tuple[int, int]:
    if width >= NORMAL_PROFILE_WIDTH:
        return TEAM_WIDTH, WIDE_SEPARATOR_WIDTH
    fixed = 2 * CONTENT_MARGIN + SCORE_WIDTH + TIME_WIDTH + 2 * COLUMN_GAP + NARROW_SEPARATOR_WIDTH
    team_width = max(MIN_TEAM_WIDTH, min(TEAM_WIDTH, (width - fixed) // 2))
    return team_width, NARROW_SEPARATOR_WIDTH


def compute_layout(
    width: int,
    games: Sequence[GameData],
    *,
    name_cap: int | None = None,
    types_cap: int = GOAL_TYPES_CAP,
    detail_level: DetailLevel | None = None,
) -> LayoutConfig:
    """Layout for one region of ``width`` columns showing ``games``."""
    width = max(width, MIN_WIDTH)
    level = detail_level or DetailLevel.for_width(width)
    cap = name_cap if name_cap is not None else level.player_name_cap
    team_width, separator = _team_geometry(width)

    home_start = CONTENT_MARGIN + 1
    away_start = home_start + team_width + separator
    side_offset = away_start - home_start
    score_column = width - CONTENT_MARGIN - SCORE_WIDTH + 1
    time_column = score_column - COLUMN_GAP - TIME_WIDTH
    name_start = home_start + NAME_OFFSET

    events = [event for game in games for event in game.goal_events]
    widest_name = min(cap, max((cell_len(event.scorer_name) for event in events), default=0))
    widest_types = max((len(event.goal_type_display) for event in events), default=0)
    # The first tag is never dropped, so its width is always reserved
    first_tag = max((len(event.goal_types[0].value) for event in events if event.goal_types), default=0)
    types_width = max(min(types_cap, widest_types), first_tag)

    # Home types end before the away name; away types end inside the margin
    icon_bound = min(away_start - TYPES_OFFSET - 1, width - CONTENT_MARGIN - side_offset - 1)
    name_floor = name_start + max(1, min(widest_name, MIN_PLAYER_NAME_WIDTH)) + 1
    if icon_bound - types_width < name_floor:
        types_width = max(first_tag, icon_bound - name_floor)
    icon = min(name_start + widest_name + 1, icon_bound - types_width, MAX_PLAY_ICON_COLUMN)
    icon = max(icon, name_start + 2)

    return LayoutConfig(
        width=width,
        home_team_width=team_width,
        away_team_width=team_width,
        separator_width=separator,
        max_player_name_width=icon - 1 - name_start,
        max_goal_types_width=types_width,
        play_icon_column=icon,
        time_column=time_column,
        score_column=score_column,
        detail_level=level,
    )


def compute_wide_layout(games: Sequence[GameData]) -> LayoutConfig:
    """Layout shared by both halves of wide mode."""
    return compute_layout(
        WIDE_COLUMN_WIDTH,
        games,
        name_cap=WIDE_PLAYER_NAME_CAP,
        types_cap=WIDE_GOAL_TYPES_CAP,
    )


def can_fit_wide(width: int) -> bool:
    return width >= WIDE_MODE_MIN_WIDTH


def wide_column_offsets() -> tuple[int, int]:
    """Column offsets of the left and right halves."""
    return 0, WIDE_COLUMN_WIDTH + WIDE_GAP


def split_for_wide(items: Sequence) -> tuple[list, list]:
    """Left half gets the larger share."""
    middle = (len(items) + 1) // 2
    return list(items[:middle]), list(items[middle:])


def compact_columns(width: int) -> int:
    usable = width - 2 * CONTENT_MARGIN
    return max(1, min(COMPACT_MAX_COLUMNS, usable // COMPACT_COLUMN_WIDTH))
