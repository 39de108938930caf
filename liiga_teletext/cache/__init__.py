"""In-memory TTL caches."""

from .store import CacheEntry, TtlLruStore
from .tiered import GoalEventsRecord, TieredCache, tournament_key

__all__ = ["CacheEntry", "GoalEventsRecord", "TieredCache", "TtlLruStore", "tournament_key"]
