"""
Timezone and date-string helpers.

The API speaks UTC RFC 3339 timestamps; the page shows local wall-clock time.
Everything that needs "now" takes it as an argument so callers can inject a
fixed time in tests.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from ..errors import DateParseError

API_DATE_FORMAT = "%Y-%m-%d"
DISPLAY_DATE_FORMAT = "%d.%m.%Y"


def now_utc() -> datetime:
    """Return the current timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def now_local() -> datetime:
    """Return the current timezone-aware local datetime."""
    return now_utc().astimezone()


def parse_api_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string, raising ``DateParseError`` when invalid."""
    try:
        return datetime.strptime(value, API_DATE_FORMAT).date()
    except (TypeError, ValueError) as exc:
        raise DateParseError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc


def format_api_date(day: date) -> str:
    return day.strftime(API_DATE_FORMAT)


def format_display_date(value: str) -> str:
    """Convert ``2024-01-15`` to ``15.01.2024``; unparseable input is returned unchanged."""
    try:
        return parse_api_date(value).strftime(DISPLAY_DATE_FORMAT)
    except DateParseError:
        return value


def parse_timestamp(value: str) -> datetime | None:
    """Parse an RFC 3339 timestamp from the API into an aware datetime.

    Naive timestamps are taken to be UTC. Returns None for empty or invalid input.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def local_date_of(timestamp: str) -> date | None:
    """Local calendar date of an API timestamp."""
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return None
    return parsed.astimezone().date()


def shift_date(value: str, days: int) -> str:
    return format_api_date(parse_api_date(value) + timedelta(days=days))
