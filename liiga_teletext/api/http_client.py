"""
Shared async HTTP client for the Liiga API.

One ``httpx.AsyncClient`` (HTTP/2 when the server negotiates it, pooled
connections) is used for every request. ``fetch`` consults the HTTP body cache
first, retries transient failures with tenacity using a wait chosen per error
kind, and caches a body only after it parsed into the expected model.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt

from ..cache import TieredCache
from ..constants import (
    CONNECTION_DELAY_SECONDS,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    HTTP_POOL_MAX_IDLE_PER_HOST,
    RATE_LIMIT_DELAY_SECONDS,
    RETRY_BASE_DELAY_SECONDS,
    RETRY_MAX_ATTEMPTS,
    RETRY_MAX_DELAY_SECONDS,
    SERVER_ERROR_DELAY_SECONDS,
    SERVICE_UNAVAILABLE_DELAY_SECONDS,
    TIMEOUT_DELAY_SECONDS,
)
from ..errors import (
    RETRYABLE_KINDS,
    ApiConnectionError,
    ApiError,
    ApiMalformedJsonError,
    ApiNetworkError,
    ApiNoDataError,
    ApiPayloadError,
    ApiTimeoutError,
    ApiUnexpectedStructureError,
    ErrorKind,
    http_error_for_status,
)
from ..logging import logger
from ..utils.clock import SYSTEM_CLOCK, Clock

M = TypeVar("M", bound=BaseModel)

USER_AGENT = "liiga-teletext (+https://github.com/liiga-teletext)"

KIND_DELAYS: dict[ErrorKind, float] = {
    ErrorKind.RATE_LIMIT: RATE_LIMIT_DELAY_SECONDS,
    ErrorKind.SERVICE_UNAVAILABLE: SERVICE_UNAVAILABLE_DELAY_SECONDS,
    ErrorKind.SERVER: SERVER_ERROR_DELAY_SECONDS,
    ErrorKind.TIMEOUT: TIMEOUT_DELAY_SECONDS,
    ErrorKind.CONNECTION: CONNECTION_DELAY_SECONDS,
}


def is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, ApiError) and exc.kind in RETRYABLE_KINDS


def retry_delay(retry_state: RetryCallState) -> float:
    """Wait before the next attempt: a fixed delay per error kind, else exponential."""
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    kind = getattr(exc, "kind", None)
    if kind in KIND_DELAYS:
        return KIND_DELAYS[kind]
    exponent = max(retry_state.attempt_number - 1, 0)
    return min(RETRY_BASE_DELAY_SECONDS * (2**exponent), RETRY_MAX_DELAY_SECONDS)


def parse_payload(body: str, model: type[M], url: str) -> M:
    """Decode a response body into ``model`` or raise the matching payload error."""
    if not body.strip():
        raise ApiNoDataError(f"Empty response from {url}", url=url)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise ApiMalformedJsonError(f"Malformed JSON from {url}: {exc}", url=url) from exc
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ApiUnexpectedStructureError(
            f"Unexpected response structure from {url}: {exc.error_count()} errors", url=url
        ) from exc


class LiigaHttpClient:
    """Connection-pooled client with response caching and retries."""

    def __init__(
        self,
        cache: TieredCache,
        *,
        timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Clock | None = None,
        max_attempts: int = RETRY_MAX_ATTEMPTS,
    ) -> None:
        self.cache = cache
        self._clock = clock or SYSTEM_CLOCK
        self._max_attempts = max_attempts
        self.request_count = 0
        self._client = httpx.AsyncClient(
            timeout=timeout_seconds,
            http2=True,
            limits=httpx.Limits(max_keepalive_connections=HTTP_POOL_MAX_IDLE_PER_HOST),
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> LiigaHttpClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(
        self,
        url: str,
        model: type[M],
        ttl_for: Callable[[M], float],
        *,
        timeout_seconds: float | None = None,
    ) -> M:
        """Return ``url`` parsed as ``model``, from cache when fresh.

        ``ttl_for`` picks the body's cache lifetime from the parsed payload.
        Two concurrent misses on one URL both fetch; the later write wins.
        """
        cached = await self.cache.get_http_response(url)
        if cached is not None:
            logger.debug("http_cache_hit", url=url)
            try:
                return parse_payload(cached, model, url)
            except ApiPayloadError:
                await self.cache.http_responses.remove(url)

        body = await self._get_with_retry(url, timeout_seconds)
        try:
            payload = parse_payload(body, model, url)
        except ApiPayloadError as exc:
            logger.warning("api_payload_error", url=url, kind=exc.kind.value, error=str(exc))
            raise
        ttl = ttl_for(payload)
        await self.cache.put_http_response(url, body, ttl)
        logger.debug("http_response_cached", url=url, ttl=ttl)
        return payload

    async def _get_with_retry(self, url: str, timeout_seconds: float | None) -> str:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=retry_delay,
            retry=retry_if_exception(is_retryable),
            sleep=self._clock.sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await self._send(url, timeout_seconds)
        except ApiError as exc:
            logger.error("api_request_failed", url=url, kind=exc.kind.value, error=str(exc))
            raise
        raise ApiNetworkError(f"No attempt made for {url}", url=url)

    async def _send(self, url: str, timeout_seconds: float | None) -> str:
        self.request_count += 1
        logger.info("api_request", url=url)
        timeout = timeout_seconds if timeout_seconds is not None else httpx.USE_CLIENT_DEFAULT
        try:
            response = await self._client.get(url, timeout=timeout)
        except httpx.TimeoutException as exc:
            raise ApiTimeoutError(f"Request to {url} timed out", url=url) from exc
        except httpx.ConnectError as exc:
            raise ApiConnectionError(f"Cannot connect to {url}: {exc}", url=url) from exc
        except httpx.TransportError as exc:
            raise ApiNetworkError(f"Network error for {url}: {exc}", url=url) from exc

        if response.status_code >= 400:
            raise http_error_for_status(response.status_code, url)
        return response.text

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        wait = retry_state.next_action.sleep if retry_state.next_action else None
        logger.warning(
            "api_request_retry",
            attempt=retry_state.attempt_number,
            kind=getattr(getattr(exc, "kind", None), "value", None),
            wait_seconds=wait,
            error=str(exc),
        )
