"""Injectable time source.

Caches, retries, the resize debouncer and the refresh loop all read time
through a ``Clock`` so tests can drive them with a manual one.
"""

from __future__ import annotations

import asyncio
import time
from datetime import datetime

from .datetime_utils import now_utc


class Clock:
    def monotonic(self) -> float:
        return time.monotonic()

    def now(self) -> datetime:
        """Aware UTC wall-clock time."""
        return now_utc()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


SYSTEM_CLOCK = Clock()
