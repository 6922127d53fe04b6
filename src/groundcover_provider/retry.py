"""Rate-limit aware retry transports (sync + async).

Both transports wrap another httpx transport. A response whose status is in
``retry_statuses`` is discarded and the buffered request is re-sent after an
exponential backoff with 0-25% jitter. Once ``max_retries`` retryable responses
have been seen, one final attempt is made and its result is returned as is.
"""

from __future__ import annotations

import asyncio
import logging
import random
import threading
import time
from collections.abc import Awaitable, Callable, Iterable

import httpx

from .errors import RequestCancelledError

logger = logging.getLogger(__name__)

CANCEL_EVENT_EXTENSION = "cancel_event"
RETRYABLE_STATUSES = frozenset({429, 502, 503, 504})
DEFAULT_MAX_RETRIES = 5
DEFAULT_MIN_WAIT = 1.0
DEFAULT_MAX_WAIT = 10.0
JITTER_RATIO = 0.25


class _RetryConfig:
    def __init__(
        self,
        *,
        max_retries: int,
        min_wait: float,
        max_wait: float,
        retry_statuses: Iterable[int],
        rng: random.Random | None,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if min_wait < 0 or max_wait < min_wait:
            raise ValueError("waits must satisfy 0 <= min_wait <= max_wait")
        self.max_retries = max_retries
        self.min_wait = min_wait
        self.max_wait = max_wait
        self.retry_statuses = frozenset(retry_statuses)
        self._rng = rng or random.Random()

    def backoff(self, attempt: int) -> float:
        return min(self.min_wait * (2**attempt), self.max_wait)

    def delay(self, attempt: int) -> float:
        base = self.backoff(attempt)
        return base + self._rng.uniform(0, base * JITTER_RATIO)


def _replay(request: httpx.Request, body: bytes) -> httpx.Request:
    return httpx.Request(
        request.method,
        request.url,
        headers=request.headers,
        content=body,
        extensions=request.extensions,
    )


def _log_retry(request: httpx.Request, status_code: int, attempt: int, max_retries: int, delay: float) -> None:
    logger.warning(
        "received status %s for %s %s, retrying (attempt %d/%d) in %.2fs",
        status_code,
        request.method,
        request.url.path,
        attempt + 1,
        max_retries,
        delay,
    )


class RateLimitRetryTransport(httpx.BaseTransport):
    def __init__(
        self,
        transport: httpx.BaseTransport,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
        min_wait: float = DEFAULT_MIN_WAIT,
        max_wait: float = DEFAULT_MAX_WAIT,
        retry_statuses: Iterable[int] = RETRYABLE_STATUSES,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self._transport = transport
        self._config = _RetryConfig(
            max_retries=max_retries,
            min_wait=min_wait,
            max_wait=max_wait,
            retry_statuses=retry_statuses,
            rng=rng,
        )
        self._sleep = sleep

    @property
    def max_retries(self) -> int:
        return self._config.max_retries

    def backoff(self, attempt: int) -> float:
        return self._config.backoff(attempt)

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        body = request.read()
        cancel_event = request.extensions.get(CANCEL_EVENT_EXTENSION)

        for attempt in range(self._config.max_retries + 1):
            response = self._transport.handle_request(_replay(request, body))
            if response.status_code not in self._config.retry_statuses:
                return response

            response.close()
            if attempt == self._config.max_retries:
                break

            delay = self._config.delay(attempt)
            _log_retry(request, response.status_code, attempt, self._config.max_retries, delay)
            self._wait(delay, cancel_event)

        logger.warning("retries exhausted for %s %s, making final attempt", request.method, request.url.path)
        return self._transport.handle_request(_replay(request, body))

    def _wait(self, delay: float, cancel_event: threading.Event | None) -> None:
        if cancel_event is None:
            self._sleep(delay)
            return
        if cancel_event.is_set() or cancel_event.wait(delay):
            raise RequestCancelledError("request cancelled while waiting to retry")

    def close(self) -> None:
        self._transport.close()


class AsyncRateLimitRetryTransport(httpx.AsyncBaseTransport):
    def __init__(
        self,
        transport: httpx.AsyncBaseTransport,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
        min_wait: float = DEFAULT_MIN_WAIT,
        max_wait: float = DEFAULT_MAX_WAIT,
        retry_statuses: Iterable[int] = RETRYABLE_STATUSES,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self._transport = transport
        self._config = _RetryConfig(
            max_retries=max_retries,
            min_wait=min_wait,
            max_wait=max_wait,
            retry_statuses=retry_statuses,
            rng=rng,
        )
        self._sleep = sleep

    @property
    def max_retries(self) -> int:
        return self._config.max_retries

    def backoff(self, attempt: int) -> float:
        return self._config.backoff(attempt)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        body = await request.aread()

        for attempt in range(self._config.max_retries + 1):
            response = await self._transport.handle_async_request(_replay(request, body))
            if response.status_code not in self._config.retry_statuses:
                return response

            await response.aclose()
            if attempt == self._config.max_retries:
                break

            delay = self._config.delay(attempt)
            _log_retry(request, response.status_code, attempt, self._config.max_retries, delay)
            # Task cancellation surfaces here as asyncio.CancelledError.
            await self._sleep(delay)

        logger.warning("retries exhausted for %s %s, making final attempt", request.method, request.url.path)
        return await self._transport.handle_async_request(_replay(request, body))

    async def aclose(self) -> None:
        await self._transport.aclose()
