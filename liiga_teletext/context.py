"""The shared collaborators every fetch and render call receives."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from .api.http_client import LiigaHttpClient
from .cache import TieredCache
from .config import Settings
from .processors.player_queue import PlayerFetchQueue
from .utils.clock import SYSTEM_CLOCK, Clock


@dataclass
class AppContext:
    """Settings, caches, HTTP client and clock for one process.

    Built once at startup and passed down; tests build their own with a
    manual clock and a mock transport.
    """

    settings: Settings
    cache: TieredCache
    client: LiigaHttpClient
    clock: Clock
    player_queue: PlayerFetchQueue | None = None

    @classmethod
    def create(
        cls,
        settings: Settings,
        *,
        clock: Clock | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> AppContext:
        clock = clock or SYSTEM_CLOCK
        cache = TieredCache(clock=clock, game_capacity=settings.cache_size)
        client = LiigaHttpClient(
            cache,
            timeout_seconds=settings.http_timeout_seconds,
            transport=transport,
            clock=clock,
        )
        return cls(settings=settings, cache=cache, client=client, clock=clock)

    @property
    def api_domain(self) -> str:
        return self.settings.api_domain

    async def aclose(self) -> None:
        if self.player_queue is not None:
            await self.player_queue.stop()
        await self.client.aclose()
