"""Circuit breaker guarding one upstream target.

States:
    CLOSED: requests pass through; consecutive handled failures are counted
    OPEN: requests are rejected without touching the network
    HALF_OPEN: the break duration has elapsed; exactly one trial request is
        let through and its outcome decides between CLOSED and OPEN

Example:
    >>> breaker = CircuitBreaker(failure_threshold=5, break_duration=30.0)
    >>> admitted = breaker.acquire()  # raises ClickUpApiError(CIRCUIT_OPEN) when open
    >>> try:
    ...     response = await send()
    ... except BaseException:
    ...     breaker.release(admitted)
    ...     raise
    >>> breaker.record_success(admitted)
"""

import logging
import threading
import time
from enum import Enum
from typing import Callable

from .errors import ClickUpApiError, ErrorKind

logger = logging.getLogger(__name__)


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """Consecutive-failure circuit breaker with a single half-open trial slot.

    ``acquire`` returns the state the call was admitted under. Passing it back
    to ``record_success``/``record_failure`` lets late results from calls
    admitted in an earlier state be ignored, so only the trial call decides a
    half-open circuit.
    """

    def __init__(
        self,
        name: str = "default",
        failure_threshold: int = 5,
        break_duration: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if failure_threshold <= 0:
            raise ValueError("failure_threshold must be positive")
        self.name = name
        self.failure_threshold = failure_threshold
        self.break_duration = break_duration
        self._clock = clock
        self._lock = threading.Lock()
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._opened_at: float | None = None
        self._trial_in_flight = False

    @property
    def state(self) -> CircuitState:
        with self._lock:
            self._check_break_elapsed()
            return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    @property
    def break_remaining(self) -> float:
        """Seconds until an open circuit admits a trial call (0 unless OPEN)."""
        with self._lock:
            if self._state is not CircuitState.OPEN or self._opened_at is None:
                return 0.0
            return max(0.0, self._opened_at + self.break_duration - self._clock())

    def _check_break_elapsed(self) -> None:
        if self._state is CircuitState.OPEN and self._clock() - self._opened_at >= self.break_duration:
            self._state = CircuitState.HALF_OPEN
            self._trial_in_flight = False
            logger.info("Circuit %s half-open, admitting one trial request", self.name)

    def _open(self) -> None:
        self._state = CircuitState.OPEN
        self._opened_at = self._clock()
        self._trial_in_flight = False
        logger.warning(
            "Circuit %s opened after %d consecutive failures, breaking for %.1fs",
            self.name, self._failure_count, self.break_duration,
        )

    def _rejected(self) -> ClickUpApiError:
        return ClickUpApiError(
            ErrorKind.CIRCUIT_OPEN,
            f"Circuit {self.name} is open; upstream marked unavailable",
        )

    def acquire(self) -> CircuitState:
        """Admit a call or raise a CIRCUIT_OPEN error."""
        with self._lock:
            self._check_break_elapsed()
            if self._state is CircuitState.CLOSED:
                return CircuitState.CLOSED
            if self._state is CircuitState.HALF_OPEN and not self._trial_in_flight:
                self._trial_in_flight = True
                return CircuitState.HALF_OPEN
            raise self._rejected()

    def record_success(self, admitted: CircuitState) -> None:
        with self._lock:
            if admitted is CircuitState.HALF_OPEN and self._state is CircuitState.HALF_OPEN:
                self._state = CircuitState.CLOSED
                self._failure_count = 0
                self._opened_at = None
                self._trial_in_flight = False
                logger.info("Circuit %s closed after successful trial request", self.name)
            elif admitted is CircuitState.CLOSED and self._state is CircuitState.CLOSED:
                self._failure_count = 0

    def record_failure(self, admitted: CircuitState) -> None:
        with self._lock:
            if admitted is CircuitState.HALF_OPEN and self._state is CircuitState.HALF_OPEN:
                self._failure_count += 1
                self._open()
            elif admitted is CircuitState.CLOSED and self._state is CircuitState.CLOSED:
                self._failure_count += 1
                if self._failure_count >= self.failure_threshold:
                    self._open()

    def release(self, admitted: CircuitState) -> None:
        """Give back a trial slot for a call that ended without an outcome (cancelled)."""
        with self._lock:
            if admitted is CircuitState.HALF_OPEN and self._state is CircuitState.HALF_OPEN:
                self._trial_in_flight = False

    def reset(self) -> None:
        with self._lock:
            self._state = CircuitState.CLOSED
            self._failure_count = 0
            self._opened_at = None
            self._trial_in_flight = False


class CircuitBreakerRegistry:
    """One breaker per upstream target (usually the API host)."""

    def __init__(
        self,
        failure_threshold: int = 5,
        break_duration: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.failure_threshold = failure_threshold
        self.break_duration = break_duration
        self._clock = clock
        self._breakers: dict[str, CircuitBreaker] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> "CircuitBreakerRegistry":
        return cls(
            failure_threshold=settings.circuit_breaker_failure_threshold,
            break_duration=settings.circuit_breaker_break_duration,
        )

    def get(self, target: str) -> CircuitBreaker:
        with self._lock:
            breaker = self._breakers.get(target)
            if breaker is None:
                breaker = CircuitBreaker(
                    name=target,
                    failure_threshold=self.failure_threshold,
                    break_duration=self.break_duration,
                    clock=self._clock,
                )
                self._breakers[target] = breaker
            return breaker
