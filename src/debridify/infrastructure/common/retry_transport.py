"""httpx transport that retries throttled and gateway-error responses."""

from __future__ import annotations

import asyncio
import random

import httpx
import structlog

log = structlog.get_logger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})

# Methods resent after a gateway error.
IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def _parse_retry_after(headers: httpx.Headers) -> float | None:
    """``Retry-After`` in seconds; HTTP-date values are not supported."""
    raw = headers.get("retry-after")
    if raw is None:
        return None
    try:
        return max(float(raw), 0.0)
    except ValueError:
        return None


class RetryTransport(httpx.AsyncBaseTransport):
    """Wraps another transport and retries on retryable status codes.

    Waits ``Retry-After`` when the server sends it, otherwise exponential
    backoff with jitter, capped at *max_backoff*. After *max_retries*
    retries the last response is returned as-is.

    Non-idempotent requests (POST, PUT, ...) are only retried on 429,
    where the server refused them without processing.
    """

    def __init__(
        self,
        wrapped: httpx.AsyncBaseTransport,
        *,
        max_retries: int = 3,
        backoff_base: float = 1.0,
        max_backoff: float = 30.0,
        retryable_status_codes: frozenset[int] = RETRYABLE_STATUS_CODES,
    ) -> None:
        self._wrapped = wrapped
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._max_backoff = max_backoff
        self._retryable = retryable_status_codes

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        attempt = 0
        while True:
            response = await self._wrapped.handle_async_request(request)
            if not self._should_retry(request, response) or attempt >= self._max_retries:
                return response

            await response.aread()
            await response.aclose()

            delay = self._compute_delay(response, attempt)
            log.info(
                "http_retry",
                host=request.url.host,
                path=request.url.path,
                status=response.status_code,
                attempt=attempt + 1,
                delay=round(delay, 2),
            )
            await asyncio.sleep(delay)
            attempt += 1

    def _should_retry(self, request: httpx.Request, response: httpx.Response) -> bool:
        if response.status_code not in self._retryable:
            return False
        return request.method in IDEMPOTENT_METHODS or response.status_code == 429

    def _compute_delay(self, response: httpx.Response, attempt: int) -> float:
        retry_after = _parse_retry_after(response.headers)
        if retry_after is not None:
            return min(retry_after, self._max_backoff)

        delay = self._backoff_base * (2**attempt)
        jitter = random.uniform(0, self._backoff_base)  # noqa: S311
        return min(delay + jitter, self._max_backoff)

    async def aclose(self) -> None:
        await self._wrapped.aclose()
