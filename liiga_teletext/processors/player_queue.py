"""
Background roster fetching.

When a listing names many scorers the rosters do not cover, their game
details are fetched one at a time by a single worker, spaced out with some
jitter, instead of in a burst at startup.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable

from ..constants import PLAYER_FETCH_JITTER, PLAYER_FETCH_QUEUE_CAPACITY, PLAYER_FETCH_SPACING_SECONDS
from ..errors import LiigaError
from ..logging import logger
from ..utils.clock import SYSTEM_CLOCK, Clock

GameKey = tuple[int, int]
FetchJob = Callable[[int, int], Awaitable[None]]


class PlayerFetchQueue:
    """Bounded single-consumer queue of ``(season, game_id)`` jobs."""

    def __init__(
        self,
        fetch_job: FetchJob,
        *,
        spacing_seconds: float = PLAYER_FETCH_SPACING_SECONDS,
        jitter: float = PLAYER_FETCH_JITTER,
        capacity: int = PLAYER_FETCH_QUEUE_CAPACITY,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._fetch_job = fetch_job
        self._spacing = spacing_seconds
        self._jitter = jitter
        self._clock = clock or SYSTEM_CLOCK
        self._rng = rng or random.Random()
        self._queue: asyncio.Queue[GameKey] = asyncio.Queue(maxsize=capacity)
        self._pending: set[GameKey] = set()
        self._worker: asyncio.Task | None = None
        self.completed = 0
        self.failed = 0

    def submit(self, season: int, game_id: int) -> bool:
        """Queue a job without waiting. Duplicates and overflow are dropped."""
        key = (season, game_id)
        if key in self._pending:
            return False
        try:
            self._queue.put_nowait(key)
        except asyncio.QueueFull:
            logger.debug("player_fetch_queue_full", season=season, game_id=game_id)
            return False
        self._pending.add(key)
        return True

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def next_delay(self) -> float:
        return max(0.0, self._spacing * (1 + self._rng.uniform(-self._jitter, self._jitter)))

    def start(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._run(), name="player-fetch-queue")

    async def join(self) -> None:
        """Wait until every queued job has been processed."""
        await self._queue.join()

    async def stop(self) -> None:
        if self._worker is None:
            return
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None

    async def _run(self) -> None:
        while True:
            season, game_id = await self._queue.get()
            self._pending.discard((season, game_id))
            try:
                await self._fetch_job(season, game_id)
                self.completed += 1
                logger.debug("player_fetch_done", season=season, game_id=game_id)
            except LiigaError as exc:
                self.failed += 1
                logger.warning("player_fetch_failed", season=season, game_id=game_id, error=str(exc))
            except Exception:
                self.failed += 1
                logger.exception("player_fetch_crashed", season=season, game_id=game_id)
            finally:
                self._queue.task_done()
            await self._clock.sleep(self.next_delay())
