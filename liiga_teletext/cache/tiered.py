"""
The tiered cache: one ``TtlLruStore`` per kind of payload.

- tournament listings keyed ``"{serie}-{date}"``
- detailed game payloads keyed ``(season, game_id)``
- raw HTTP bodies keyed by URL, each with its own TTL
- team rosters keyed ``(season, team_id)``
- processed goal events keyed ``(season, game_id)``

Tournament and game entries carry a live-state flag; the TTL is picked from
that flag when the entry is read.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import timedelta

from ..constants import (
    COMPLETED_GAME_TTL_SECONDS,
    DEFAULT_HTTP_TTL_SECONDS,
    DETAILED_GAME_CACHE_CAPACITY,
    GOAL_EVENTS_CACHE_CAPACITY,
    HTTP_RESPONSE_CACHE_CAPACITY,
    LIVE_GAME_TTL_SECONDS,
    PLAYER_CACHE_CAPACITY,
    PLAYER_TTL_SECONDS,
    STARTING_GAME_TTL_SECONDS,
    STARTING_SOON_AFTER_SECONDS,
    STARTING_SOON_BEFORE_SECONDS,
    TOURNAMENT_CACHE_CAPACITY,
)
from ..logging import logger
from ..models import DetailedGameResponse, GameData, GoalEventData, Player, ScheduleResponse
from ..utils.clock import SYSTEM_CLOCK, Clock
from ..utils.datetime_utils import parse_timestamp
from .store import CacheEntry, TtlLruStore


def live_state_ttl(entry: CacheEntry) -> float:
    return LIVE_GAME_TTL_SECONDS if entry.is_live else COMPLETED_GAME_TTL_SECONDS


def http_ttl(entry: CacheEntry) -> float:
    return entry.ttl_seconds if entry.ttl_seconds is not None else DEFAULT_HTTP_TTL_SECONDS


def player_ttl(entry: CacheEntry) -> float:
    return PLAYER_TTL_SECONDS


def tournament_key(serie: str, date: str) -> str:
    return f"{serie}-{date}"


@dataclass
class GoalEventsRecord:
    """Processed goal events for one game.

    ``was_cleared`` marks an entry emptied on purpose because a new goal
    landed; the next read reports a miss so the events are rebuilt.
    """

    events: tuple[GoalEventData, ...] = ()
    last_known_score: tuple[int, int] | None = None
    was_cleared: bool = False


@dataclass
class CacheStats:
    sizes: dict[str, int] = field(default_factory=dict)
    hits: dict[str, int] = field(default_factory=dict)
    misses: dict[str, int] = field(default_factory=dict)


class TieredCache:
    """All cache stores behind one object that is passed to each layer."""

    def __init__(self, *, clock: Clock | None = None, game_capacity: int | None = None) -> None:
        self.clock = clock or SYSTEM_CLOCK
        self.tournaments: TtlLruStore[str, ScheduleResponse] = TtlLruStore(
            "tournament", TOURNAMENT_CACHE_CAPACITY, live_state_ttl, clock=self.clock
        )
        self.detailed_games: TtlLruStore[tuple[int, int], DetailedGameResponse] = TtlLruStore(
            "detailed_game", game_capacity or DETAILED_GAME_CACHE_CAPACITY, live_state_ttl, clock=self.clock
        )
        self.http_responses: TtlLruStore[str, str] = TtlLruStore(
            "http_response", HTTP_RESPONSE_CACHE_CAPACITY, http_ttl, clock=self.clock
        )
        self.players: TtlLruStore[tuple[int, str], list[Player]] = TtlLruStore(
            "player", PLAYER_CACHE_CAPACITY, player_ttl, clock=self.clock
        )
        self.goal_events: TtlLruStore[tuple[int, int], GoalEventsRecord] = TtlLruStore(
            "goal_events", game_capacity or GOAL_EVENTS_CACHE_CAPACITY, live_state_ttl, clock=self.clock
        )

    # ------------------------------------------------------------------
    # Tournament listings
    # ------------------------------------------------------------------

    async def put_tournament(self, key: str, response: ScheduleResponse) -> None:
        await self.tournaments.put(key, response, is_live=response.has_live_games)
        logger.debug("tournament_cached", key=key, has_live_games=response.has_live_games)

    async def get_tournament_with_live_check(
        self, key: str, current_games: Iterable[GameData]
    ) -> ScheduleResponse | None:
        """Read an entry, treating it as stale when its live flag disagrees with what is on screen."""
        entry = await self.tournaments.peek(key)
        if entry is None:
            return None
        shown_live = any(game.is_live for game in current_games)
        if entry.is_live != shown_live:
            await self.tournaments.remove(key)
            logger.info("tournament_cache_live_state_changed", key=key, cached=entry.is_live, current=shown_live)
            return None
        return await self.tournaments.get(key)

    async def get_tournament_with_start_check(self, key: str) -> ScheduleResponse | None:
        """Read an entry, using the short starting-game TTL when a game is about to start."""
        entry = await self.tournaments.peek(key)
        if entry is None:
            return None
        if self._has_starting_game(entry.value):
            response = await self.tournaments.get(key, ttl_seconds=STARTING_GAME_TTL_SECONDS)
            if response is None:
                logger.info("tournament_cache_starting_game_bypass", key=key)
            return response
        return await self.tournaments.get(key)

    def _has_starting_game(self, response: ScheduleResponse) -> bool:
        now = self.clock.now()
        window_start = now - timedelta(seconds=STARTING_SOON_AFTER_SECONDS)
        window_end = now + timedelta(seconds=STARTING_SOON_BEFORE_SECONDS)
        for game in response.games:
            if game.started:
                continue
            start = parse_timestamp(game.start)
            if start is not None and window_start <= start <= window_end:
                return True
        return False

    async def invalidate_tournaments_for_date(self, date: str) -> list[str]:
        """Drop every tournament listing for ``date``.

        Keys must end in exactly ``-{date}``; a looser substring match could
        drop listings for other dates.
        """
        suffix = f"-{date}"
        removed = await self.tournaments.remove_where(
            lambda key: key.endswith(suffix) and len(key) > len(suffix)
        )
        if removed:
            logger.info("tournament_cache_invalidated", date=date, keys=removed)
        return removed

    # ------------------------------------------------------------------
    # Detailed games
    # ------------------------------------------------------------------

    async def put_detailed_game(self, season: int, game_id: int, response: DetailedGameResponse) -> None:
        await self.detailed_games.put((season, game_id), response, is_live=response.game.is_live)

    async def get_detailed_game(self, season: int, game_id: int) -> DetailedGameResponse | None:
        return await self.detailed_games.get((season, game_id))

    # ------------------------------------------------------------------
    # HTTP bodies
    # ------------------------------------------------------------------

    async def put_http_response(self, url: str, body: str, ttl_seconds: float) -> None:
        await self.http_responses.put(url, body, ttl_seconds=ttl_seconds)

    async def get_http_response(self, url: str) -> str | None:
        return await self.http_responses.get(url)

    # ------------------------------------------------------------------
    # Rosters
    # ------------------------------------------------------------------

    async def put_players(self, season: int, team_id: str, players: list[Player]) -> None:
        await self.players.put((season, team_id), players)

    async def get_players(self, season: int, team_id: str) -> list[Player] | None:
        return await self.players.get((season, team_id))

    # ------------------------------------------------------------------
    # Goal events
    # ------------------------------------------------------------------

    async def put_goal_events(
        self,
        season: int,
        game_id: int,
        events: Iterable[GoalEventData],
        *,
        is_live: bool,
        score: tuple[int, int] | None = None,
    ) -> None:
        record = GoalEventsRecord(events=tuple(events), last_known_score=score)
        await self.goal_events.put((season, game_id), record, is_live=is_live)

    async def get_goal_events(self, season: int, game_id: int) -> tuple[GoalEventData, ...] | None:
        record = await self.goal_events.get((season, game_id))
        if record is None or record.was_cleared:
            return None
        return record.events

    async def get_goal_events_record(self, season: int, game_id: int) -> GoalEventsRecord | None:
        entry = await self.goal_events.peek((season, game_id))
        return entry.value if entry is not None else None

    async def clear_goal_events(self, season: int, game_id: int, *, new_score: tuple[int, int] | None = None) -> None:
        """Empty a game's entry because a goal landed; keeps the score for comparison."""
        record = GoalEventsRecord(events=(), last_known_score=new_score, was_cleared=True)
        await self.goal_events.put((season, game_id), record, is_live=True)
        logger.info("goal_events_cache_cleared", season=season, game_id=game_id, score=new_score)

    # ------------------------------------------------------------------

    async def stats(self) -> CacheStats:
        stats = CacheStats()
        for store in self._stores():
            stats.sizes[store.name] = await store.size()
            stats.hits[store.name] = store.hits
            stats.misses[store.name] = store.misses
        return stats

    def _stores(self) -> list[TtlLruStore]:
        return [self.tournaments, self.detailed_games, self.http_responses, self.players, self.goal_events]
