"""
Refresh timing for the interactive loop.

The controller moves ``IDLE -> FETCHING -> RENDERING -> WAITING -> IDLE``
and decides when the next automatic refresh is due from the games on
screen: live games every minute, finished ones hourly, and games about to
start on a short floor that grows with the number of games shown.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from enum import Enum

from .constants import (
    ACTIVE_POLL_SECONDS,
    ACTIVE_THRESHOLD_SECONDS,
    COMPLETED_REFRESH_SECONDS,
    IDLE_POLL_SECONDS,
    IDLE_THRESHOLD_SECONDS,
    LIVE_REFRESH_SECONDS,
    MANUAL_REFRESH_COOLDOWN_SECONDS,
    SEMI_ACTIVE_POLL_SECONDS,
    STARTING_SOON_AFTER_SECONDS,
    STARTING_SOON_BEFORE_SECONDS,
    STARTING_SOON_REFRESH_FLOOR_SECONDS,
)
from .logging import logger
from .models import GameData, ScoreType
from .utils.clock import SYSTEM_CLOCK, Clock
from .utils.datetime_utils import parse_timestamp


class RefreshState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    RENDERING = "rendering"
    WAITING = "waiting"


def starting_soon_floor(game_count: int, min_refresh_interval: float | None = None) -> float:
    if min_refresh_interval is not None:
        return max(min_refresh_interval, STARTING_SOON_REFRESH_FLOOR_SECONDS)
    if game_count >= 6:
        return 30
    if game_count >= 4:
        return 20
    return STARTING_SOON_REFRESH_FLOOR_SECONDS


def game_refresh_interval(game: GameData, now: datetime, floor: float) -> float:
    """Preferred refresh interval for one game."""
    if game.score_type is ScoreType.ONGOING:
        return LIVE_REFRESH_SECONDS
    if game.score_type is ScoreType.FINAL:
        return COMPLETED_REFRESH_SECONDS
    start = parse_timestamp(game.start)
    if start is None:
        return floor
    until_window = (start - now).total_seconds() - STARTING_SOON_BEFORE_SECONDS
    if until_window <= 0:
        # Within the window, or past it while still not flagged started
        return floor
    return max(floor, min(COMPLETED_REFRESH_SECONDS, until_window))


def next_refresh_interval(
    games: Sequence[GameData], now: datetime, *, min_refresh_interval: float | None = None
) -> float:
    if not games:
        return COMPLETED_REFRESH_SECONDS
    floor = starting_soon_floor(len(games), min_refresh_interval)
    return min(game_refresh_interval(game, now, floor) for game in games)


def is_starting_soon(game: GameData, now: datetime) -> bool:
    if game.score_type is not ScoreType.SCHEDULED:
        return False
    start = parse_timestamp(game.start)
    if start is None:
        return False
    seconds = (start - now).total_seconds()
    return -STARTING_SOON_AFTER_SECONDS <= seconds <= STARTING_SOON_BEFORE_SECONDS


def poll_interval(idle_seconds: float) -> float:
    """Keyboard poll timeout; slower the longer the user has been idle."""
    if idle_seconds < ACTIVE_THRESHOLD_SECONDS:
        return ACTIVE_POLL_SECONDS
    if idle_seconds < IDLE_THRESHOLD_SECONDS:
        return SEMI_ACTIVE_POLL_SECONDS
    return IDLE_POLL_SECONDS


class RefreshController:
    """Refresh state and timers; reads time only through ``clock``."""

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        min_refresh_interval: float | None = None,
        auto_refresh: bool = True,
    ) -> None:
        self._clock = clock or SYSTEM_CLOCK
        self.min_refresh_interval = min_refresh_interval
        self.auto_refresh = auto_refresh
        self.state = RefreshState.IDLE
        self.next_refresh_at: float | None = None
        self.interval: float | None = None
        self._last_manual_at: float | None = None
        self._last_input_at = self._clock.monotonic()
        self.refresh_requested = True

    def begin_fetch(self) -> None:
        self.state = RefreshState.FETCHING
        self.refresh_requested = False

    def begin_render(self) -> None:
        self.state = RefreshState.RENDERING

    def schedule(self, games: Sequence[GameData]) -> float:
        """Enter WAITING and return the seconds until the next automatic refresh."""
        self.interval = next_refresh_interval(
            games, self._clock.now(), min_refresh_interval=self.min_refresh_interval
        )
        self.next_refresh_at = self._clock.monotonic() + self.interval
        self.state = RefreshState.WAITING
        logger.debug("refresh_scheduled", interval=self.interval, auto_refresh=self.auto_refresh)
        return self.interval

    def due(self) -> bool:
        if self.refresh_requested:
            return True
        if not self.auto_refresh or self.next_refresh_at is None:
            return False
        return self._clock.monotonic() >= self.next_refresh_at

    def request_refresh(self) -> None:
        """Refresh right away (date or mode change), bypassing the manual cooldown."""
        self.refresh_requested = True
        self.state = RefreshState.IDLE

    def request_manual_refresh(self) -> bool:
        """Handle ``r``; ignored while the cooldown runs."""
        now = self._clock.monotonic()
        if self._last_manual_at is not None and now - self._last_manual_at < MANUAL_REFRESH_COOLDOWN_SECONDS:
            logger.debug("manual_refresh_cooldown", remaining=MANUAL_REFRESH_COOLDOWN_SECONDS - (now - self._last_manual_at))
            return False
        self._last_manual_at = now
        self.request_refresh()
        return True

    def register_input(self) -> None:
        self._last_input_at = self._clock.monotonic()

    def poll_interval(self) -> float:
        return poll_interval(self._clock.monotonic() - self._last_input_at)
