"""Team-name abbreviations used by compact mode."""

from __future__ import annotations

TEAM_ABBREVIATIONS: dict[str, str] = {
    "Tappara": "TAP",
    "Tampereen Tappara": "TAP",
    "HIFK": "IFK",
    "HIFK Helsinki": "IFK",
    "TPS": "TPS",
    "TPS Turku": "TPS",
    "JYP": "JYP",
    "Jyväskylän JYP": "JYP",
    "JYP Jyväskylä": "JYP",
    "Ilves": "ILV",
    "Tampereen Ilves": "ILV",
    "KalPa": "KAL",
    "KalPa Kuopio": "KAL",
    "Kärpät": "KÄR",
    "Oulun Kärpät": "KÄR",
    "Lukko": "LUK",
    "Rauman Lukko": "LUK",
    "Pelicans": "PEL",
    "Lahden Pelicans": "PEL",
    "SaiPa": "SAI",
    "Sport": "SPO",
    "Vaasan Sport": "SPO",
    "HPK": "HPK",
    "Jukurit": "JUK",
    "Mikkelin Jukurit": "JUK",
    "Ässät": "ÄSS",
    "Porin Ässät": "ÄSS",
    "KooKoo": "KOO",
    "K-Espoo": "KES",
    "Kiekko-Espoo": "KES",
}


def get_team_abbreviation(team_name: str) -> str:
    """Canonical abbreviation, or the first three letters upper-cased.

    A name without any letters is returned unchanged.
    """
    name = team_name.strip()
    if name in TEAM_ABBREVIATIONS:
        return TEAM_ABBREVIATIONS[name]
    letters = "".join(char for char in name if char.isalpha()).upper()
    if not letters:
        return team_name
    return letters[:3]
