"""Exception hierarchy for the teletext viewer.

Every failure the viewer can surface maps to one ``ErrorKind``. The HTTP layer
raises the concrete subclasses; the refresh loop turns them into Finnish
messages with ``user_message`` so the page always has something to show.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    NETWORK = "network"
    NOT_FOUND = "not_found"
    RATE_LIMIT = "rate_limit"
    CLIENT = "client"
    SERVER = "server"
    SERVICE_UNAVAILABLE = "service_unavailable"
    NO_DATA = "no_data"
    MALFORMED_JSON = "malformed_json"
    UNEXPECTED_STRUCTURE = "unexpected_structure"
    CONFIG = "config"
    TERMINAL = "terminal"
    DATE_PARSE = "date_parse"


class LiigaError(RuntimeError):
    """Base class for all errors raised by the viewer."""

    kind: ErrorKind = ErrorKind.NETWORK


class ConfigError(LiigaError):
    """Raised when the configuration is missing or invalid."""

    kind = ErrorKind.CONFIG


class TerminalError(LiigaError):
    """Raised when the terminal cannot be queried or written."""

    kind = ErrorKind.TERMINAL


class DateParseError(LiigaError):
    """Raised for dates that are not valid ``YYYY-MM-DD`` strings."""

    kind = ErrorKind.DATE_PARSE


# ---------------------------------------------------------------------------
# API errors
# ---------------------------------------------------------------------------


class ApiError(LiigaError):
    """Raised when talking to the Liiga API fails."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class ApiNetworkError(ApiError):
    """Transport-level failure (reset, TLS, DNS)."""

    kind = ErrorKind.NETWORK


class ApiTimeoutError(ApiNetworkError):
    kind = ErrorKind.TIMEOUT


class ApiConnectionError(ApiNetworkError):
    kind = ErrorKind.CONNECTION


class ApiHttpError(ApiError):
    """Non-2xx response."""

    kind = ErrorKind.CLIENT

    def __init__(self, message: str, *, status: int, url: str | None = None) -> None:
        super().__init__(message, url=url)
        self.status = status


class ApiNotFoundError(ApiHttpError):
    kind = ErrorKind.NOT_FOUND


class ApiRateLimitError(ApiHttpError):
    kind = ErrorKind.RATE_LIMIT


class ApiClientError(ApiHttpError):
    kind = ErrorKind.CLIENT


class ApiServerError(ApiHttpError):
    kind = ErrorKind.SERVER


class ApiServiceUnavailableError(ApiServerError):
    kind = ErrorKind.SERVICE_UNAVAILABLE


class ApiPayloadError(ApiError):
    """Response arrived but its body could not be used."""

    kind = ErrorKind.UNEXPECTED_STRUCTURE


class ApiNoDataError(ApiPayloadError):
    kind = ErrorKind.NO_DATA


class ApiMalformedJsonError(ApiPayloadError):
    kind = ErrorKind.MALFORMED_JSON


class ApiUnexpectedStructureError(ApiPayloadError):
    kind = ErrorKind.UNEXPECTED_STRUCTURE


def http_error_for_status(status: int, url: str) -> ApiHttpError:
    """Build the error class matching an HTTP status code."""
    message = f"HTTP {status} for {url}"
    if status == 404:
        return ApiNotFoundError(message, status=status, url=url)
    if status == 429:
        return ApiRateLimitError(message, status=status, url=url)
    if status in (502, 503):
        return ApiServiceUnavailableError(message, status=status, url=url)
    if status >= 500:
        return ApiServerError(message, status=status, url=url)
    return ApiClientError(message, status=status, url=url)


RETRYABLE_KINDS = frozenset(
    {
        ErrorKind.TIMEOUT,
        ErrorKind.CONNECTION,
        ErrorKind.NETWORK,
        ErrorKind.RATE_LIMIT,
        ErrorKind.SERVER,
        ErrorKind.SERVICE_UNAVAILABLE,
    }
)

_USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.TIMEOUT: "Yhteys aikakatkaistiin, yritetään uudelleen",
    ErrorKind.CONNECTION: "Palvelimeen ei saatu yhteyttä",
    ErrorKind.NETWORK: "Verkkovirhe, tarkista yhteys",
    ErrorKind.NOT_FOUND: "Tietoja ei löytynyt",
    ErrorKind.RATE_LIMIT: "Liikaa pyyntöjä, yritä hetken päästä uudelleen",
    ErrorKind.CLIENT: "Virheellinen pyyntö",
    ErrorKind.SERVER: "Palvelinvirhe, yritetään myöhemmin uudelleen",
    ErrorKind.SERVICE_UNAVAILABLE: "Palvelu ei ole käytettävissä",
    ErrorKind.NO_DATA: "Palvelin ei palauttanut tietoja",
    ErrorKind.MALFORMED_JSON: "Palvelimen vastaus oli virheellinen",
    ErrorKind.UNEXPECTED_STRUCTURE: "Palvelimen vastaus oli odottamaton",
    ErrorKind.CONFIG: "Asetuksissa on virhe",
    ErrorKind.TERMINAL: "Päätteen käsittely epäonnistui",
    ErrorKind.DATE_PARSE: "Virheellinen päivämäärä",
}


def user_message(exc: BaseException) -> str:
    """Return the Finnish text shown on the page for an error."""
    kind = getattr(exc, "kind", ErrorKind.NETWORK)
    return _USER_MESSAGES.get(kind, "Tuntematon virhe")
