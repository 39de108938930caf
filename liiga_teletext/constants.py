"""Shared constants: cache lifetimes, retry timings, layout defaults."""

from __future__ import annotations

# Cache TTLs (seconds)
LIVE_GAME_TTL_SECONDS = 8
STARTING_GAME_TTL_SECONDS = 30
COMPLETED_GAME_TTL_SECONDS = 3600
PLAYER_TTL_SECONDS = 86400
DEFAULT_HTTP_TTL_SECONDS = 300

# Starting-soon window relative to now
STARTING_SOON_BEFORE_SECONDS = 10 * 60
STARTING_SOON_AFTER_SECONDS = 5 * 60

# Cache capacities
TOURNAMENT_CACHE_CAPACITY = 50
HTTP_RESPONSE_CACHE_CAPACITY = 100
DETAILED_GAME_CACHE_CAPACITY = 200
GOAL_EVENTS_CACHE_CAPACITY = 200
PLAYER_CACHE_CAPACITY = 100

# HTTP client
DEFAULT_HTTP_TIMEOUT_SECONDS = 30
HTTP_POOL_MAX_IDLE_PER_HOST = 100
DEFAULT_API_FETCH_TIMEOUT_SECONDS = 5

# Retry policy
RETRY_MAX_ATTEMPTS = 3
RETRY_BASE_DELAY_SECONDS = 1.0
RETRY_MAX_DELAY_SECONDS = 30.0
RATE_LIMIT_DELAY_SECONDS = 60.0
SERVICE_UNAVAILABLE_DELAY_SECONDS = 30.0
SERVER_ERROR_DELAY_SECONDS = 5.0
TIMEOUT_DELAY_SECONDS = 2.0
CONNECTION_DELAY_SECONDS = 10.0

# Background roster fetching
PLAYER_FETCH_THRESHOLD = 3
PLAYER_FETCH_SPACING_SECONDS = 0.45
PLAYER_FETCH_JITTER = 0.2
PLAYER_FETCH_QUEUE_CAPACITY = 256

# Refresh timing (seconds)
LIVE_REFRESH_SECONDS = 60
COMPLETED_REFRESH_SECONDS = 3600
STARTING_SOON_REFRESH_FLOOR_SECONDS = 15
MANUAL_REFRESH_COOLDOWN_SECONDS = 10

# Keyboard polling
ACTIVE_POLL_SECONDS = 0.05
SEMI_ACTIVE_POLL_SECONDS = 0.2
IDLE_POLL_SECONDS = 0.5
ACTIVE_THRESHOLD_SECONDS = 5
IDLE_THRESHOLD_SECONDS = 30

# Data sanity bounds
MAX_GAME_MINUTE = 200
MAX_TEAM_NAME_LENGTH = 50
MAX_PLAYER_NAME_LENGTH = 100

# Tournament calendar (months, inclusive)
PRESEASON_START_MONTH = 5
PRESEASON_END_MONTH = 9
PLAYOFFS_START_MONTH = 3
PLAYOFFS_END_MONTH = 6

# Page
PAGE_NUMBER = 221
PAGE_TITLE = "JÄÄKIEKKO"
DEFAULT_SUBHEADER = "SM-LIIGA"

# Finnish fallbacks
FALLBACK_PLAYER_NAME = "Pelaaja {player_id}"
UNKNOWN_PLAYER_NAME = "Tuntematon pelaaja"
UNKNOWN_TEAM_NAME = "Unknown"
