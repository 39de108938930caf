"""Player-name formatting and disambiguation."""

from .disambiguation import DisambiguationContext, RosterName, disambiguate
from .formatting import create_fallback_name, extract_first_chars, extract_first_initial, format_for_display

__all__ = [
    "DisambiguationContext",
    "RosterName",
    "create_fallback_name",
    "disambiguate",
    "extract_first_chars",
    "extract_first_initial",
    "format_for_display",
]
