"""Debounced, validated terminal-size tracking."""

from __future__ import annotations

from ..logging import logger
from ..utils.clock import SYSTEM_CLOCK, Clock

DEFAULT_DEBOUNCE_SECONDS = 0.1
MAX_DETECTION_FAILURES = 3
FALLBACK_SIZE = (80, 24)
LAYOUT_WIDTH_THRESHOLDS = (100, 120)
LAYOUT_HEIGHT_THRESHOLD = 3

Size = tuple[int, int]


def should_update_layout(old: Size, new: Size) -> bool:
    """Whether a size change is big enough to recompute the layout."""
    old_width, old_height = old
    new_width, new_height = new
    for threshold in LAYOUT_WIDTH_THRESHOLDS:
        if (old_width >= threshold) != (new_width >= threshold):
            return True
    return abs(new_height - old_height) >= LAYOUT_HEIGHT_THRESHOLD


class ResizeHandler:
    """
    Collects size reports and hands out a settled, valid size.

    ``observe`` records what the terminal reported; ``poll`` returns a new
    size once no further change arrived for ``debounce_seconds``. A zero
    width or height is a failed detection: the last good size stands in,
    and after three failures in a row the 80x24 fallback does.
    """

    def __init__(self, initial: Size = FALLBACK_SIZE, *, debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS, clock: Clock | None = None) -> None:
        self._clock = clock or SYSTEM_CLOCK
        self.debounce_seconds = debounce_seconds
        self.current: Size = initial if self.is_valid(initial) else FALLBACK_SIZE
        self._last_good: Size = self.current
        self._pending: Size | None = None
        self._pending_since = 0.0
        self.failures = 0

    @staticmethod
    def is_valid(size: Size) -> bool:
        width, height = size
        return width > 0 and height > 0

    def validate(self, size: Size) -> Size:
        """Map a reported size to a usable one, counting detection failures."""
        if self.is_valid(size):
            self.failures = 0
            self._last_good = size
            return size
        self.failures += 1
        logger.warning("terminal_size_invalid", width=size[0], height=size[1], failures=self.failures)
        if self.failures >= MAX_DETECTION_FAILURES:
            return FALLBACK_SIZE
        return self._last_good

    def observe(self, width: int, height: int) -> None:
        size = self.validate((width, height))
        if size == self.current and self._pending is None:
            return
        if size != self._pending:
            self._pending = size
            self._pending_since = self._clock.monotonic()

    def poll(self) -> Size | None:
        """The new size once it has been stable for the debounce window, else None."""
        if self._pending is None:
            return None
        if self._clock.monotonic() - self._pending_since < self.debounce_seconds:
            return None
        size, self._pending = self._pending, None
        if size == self.current:
            return None
        self.current = size
        logger.debug("terminal_resized", width=size[0], height=size[1])
        return size
