"""Display-side domain types built from the wire models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ScoreType(str, Enum):
    SCHEDULED = "scheduled"
    ONGOING = "ongoing"
    FINAL = "final"


class Tournament(str, Enum):
    """Tournament (serie) tags in priority order for page subheaders."""

    PLAYOFFS = "playoffs"
    PLAYOUT = "playout"
    QUALIFICATIONS = "qualifications"
    PRESEASON = "valmistavat_ottelut"
    REGULAR_SEASON = "runkosarja"

    @classmethod
    def from_api(cls, value: str | None) -> Tournament:
        """Parse the games endpoint's serie string; unknown values are regular season."""
        tag = (value or "").strip().lower()
        if tag == "practice":
            return cls.PRESEASON
        try:
            return cls(tag)
        except ValueError:
            return cls.REGULAR_SEASON

    @classmethod
    def from_serie_number(cls, number: int) -> Tournament:
        for tournament, serie in _SERIE_NUMBERS.items():
            if serie == number:
                return tournament
        return cls.REGULAR_SEASON

    @property
    def serie_number(self) -> int:
        return _SERIE_NUMBERS[self]

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def priority(self) -> int:
        return list(Tournament).index(self)


_SERIE_NUMBERS: dict[Tournament, int] = {
    Tournament.REGULAR_SEASON: 1,
    Tournament.PLAYOFFS: 2,
    Tournament.PLAYOUT: 3,
    Tournament.QUALIFICATIONS: 4,
    Tournament.PRESEASON: 5,
}

_LABELS: dict[Tournament, str] = {
    Tournament.PLAYOFFS: "PLAYOFFS",
    Tournament.PLAYOUT: "PLAYOUT-OTTELUT",
    Tournament.QUALIFICATIONS: "LIIGAKARSINTA",
    Tournament.PRESEASON: "HARJOITUSOTTELUT",
    Tournament.REGULAR_SEASON: "RUNKOSARJA",
}


class GoalType(str, Enum):
    """Goal-type tags the page can show, in display order."""

    POWER_PLAY = "YV"
    POWER_PLAY_5_ON_3 = "YV2"
    EMPTY_NET = "IM"
    PENALTY_SHOT = "VT"
    SHORT_HANDED = "AV"
    OWN_GOAL = "TM"

    @classmethod
    def parse_all(cls, tags: list[str] | tuple[str, ...]) -> tuple[GoalType, ...]:
        """Keep the recognized tags, de-duplicated, in display order."""
        present = {tag.strip().upper() for tag in tags}
        return tuple(goal_type for goal_type in cls if goal_type.value in present)


@dataclass(frozen=True)
class GoalEventData:
    """One goal as the page shows it."""

    scorer_player_id: int
    scorer_name: str
    minute: int
    home_team_score: int
    away_team_score: int
    is_winning_goal: bool
    goal_types: tuple[GoalType, ...]
    is_home_team: bool
    video_clip_url: str | None = None
    period: int = 0
    game_time: int = 0
    event_id: int = 0
    # Raw tags kept for colour rules (VL marks a deciding penalty-shot goal)
    raw_goal_types: tuple[str, ...] = ()

    @property
    def goal_type_display(self) -> str:
        return " ".join(goal_type.value for goal_type in self.goal_types)


@dataclass(frozen=True)
class GameData:
    """The per-game record shown on a teletext page."""

    home_team: str
    away_team: str
    time: str
    result: str
    score_type: ScoreType
    is_overtime: bool
    is_shootout: bool
    serie: Tournament
    goal_events: tuple[GoalEventData, ...] = ()
    played_time: int = 0
    start: str = ""
    game_id: int = 0
    season: int = 0

    @property
    def home_goal_events(self) -> list[GoalEventData]:
        return [event for event in self.goal_events if event.is_home_team]

    @property
    def away_goal_events(self) -> list[GoalEventData]:
        return [event for event in self.goal_events if not event.is_home_team]

    @property
    def is_live(self) -> bool:
        return self.score_type is ScoreType.ONGOING

    @property
    def score(self) -> tuple[int, int] | None:
        home, sep, away = self.result.partition("-")
        if not sep:
            return None
        try:
            return int(home), int(away)
        except ValueError:
            return None


@dataclass
class FetchResult:
    """Games for one page and the date they belong to."""

    games: list[GameData] = field(default_factory=list)
    date: str = ""
    is_historical: bool = False
    is_future: bool = False
