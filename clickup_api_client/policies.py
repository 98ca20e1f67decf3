"""Resilience policies wrapped around every outbound request.

Outermost to innermost: circuit breaker -> backoff retry -> rate-limit retry
-> send. The policies only decide whether and when to send again; whatever
the last attempt produced (a response or a transport exception) is handed back
unchanged for the connection to classify.
"""

import asyncio
import logging
from typing import Awaitable, Callable

import httpx

from .circuit_breaker import CircuitBreaker
from .retry_after import parse_retry_after

logger = logging.getLogger(__name__)

Send = Callable[[], Awaitable[httpx.Response]]
Sleep = Callable[[float], Awaitable[None]]

# Network errors, timeouts and protocol errors; all subclass TransportError
TRANSIENT_EXCEPTIONS = (httpx.TransportError,)


def is_handled_status(status_code: int) -> bool:
    """Statuses treated as transient: 408, 429 and 5xx."""
    return status_code in (408, 429) or status_code >= 500


class RateLimitRetry:
    """Retry a 429 once, after the delay its Retry-After header asks for."""

    def __init__(self, fallback_delay: float = 5.0, sleep: Sleep = asyncio.sleep):
        self.fallback_delay = fallback_delay
        self._sleep = sleep

    def delay_for(self, response: httpx.Response) -> float:
        delay = parse_retry_after(response.headers.get("retry-after"))
        return self.fallback_delay if delay is None else delay

    async def execute(self, send: Send) -> httpx.Response:
        response = await send()
        if response.status_code != 429 or "retry-after" not in response.headers:
            return response

        delay = self.delay_for(response)
        logger.warning("HTTP 429, retrying once in %.1fs (Retry-After: %s)", delay, response.headers["retry-after"])
        await self._sleep(delay)
        return await send()


class BackoffRetry:
    """Retry transient failures with exponential backoff.

    At most ``retry_count`` retries after the first attempt. The delay before
    retry k (1-based) is ``base_delay * 2**k``: 2s, 4s, 8s with the defaults.
    """

    def __init__(self, retry_count: int = 3, base_delay: float = 1.0, sleep: Sleep = asyncio.sleep):
        self.retry_count = retry_count
        self.base_delay = base_delay
        self._sleep = sleep

    def delay_for(self, retry: int) -> float:
        return self.base_delay * 2**retry

    async def execute(self, send: Send) -> httpx.Response:
        for attempt in range(self.retry_count + 1):
            try:
                response = await send()
            except TRANSIENT_EXCEPTIONS as exc:
                if attempt == self.retry_count:
                    raise
                reason = f"{type(exc).__name__}: {exc}"
            else:
                if not is_handled_status(response.status_code) or attempt == self.retry_count:
                    return response
                reason = f"HTTP {response.status_code}"

            retry = attempt + 1
            delay = self.delay_for(retry)
            logger.warning("%s, retry %d/%d in %.1fs", reason, retry, self.retry_count, delay)
            await self._sleep(delay)

        raise AssertionError("unreachable")


class PolicyPipeline:
    """Circuit breaker around backoff retry around rate-limit retry."""

    def __init__(
        self,
        circuit_breaker: CircuitBreaker,
        backoff: BackoffRetry | None = None,
        rate_limit: RateLimitRetry | None = None,
    ):
        self.circuit_breaker = circuit_breaker
        self.backoff = backoff or BackoffRetry()
        self.rate_limit = rate_limit or RateLimitRetry()

    @classmethod
    def from_settings(cls, settings, circuit_breaker: CircuitBreaker, sleep: Sleep = asyncio.sleep) -> "PolicyPipeline":
        return cls(
            circuit_breaker,
            backoff=BackoffRetry(settings.retry_count, settings.retry_base_delay, sleep=sleep),
            rate_limit=RateLimitRetry(settings.rate_limit_fallback_delay, sleep=sleep),
        )

    async def execute(self, send: Send) -> httpx.Response:
        admitted = self.circuit_breaker.acquire()
        try:
            response = await self.backoff.execute(lambda: self.rate_limit.execute(send))
        except TRANSIENT_EXCEPTIONS:
            self.circuit_breaker.record_failure(admitted)
            raise
        except BaseException:
            # Cancelled or a non-transient error: no verdict on upstream health
            self.circuit_breaker.release(admitted)
            raise

        if is_handled_status(response.status_code):
            self.circuit_breaker.record_failure(admitted)
        else:
            self.circuit_breaker.record_success(admitted)
        return response
