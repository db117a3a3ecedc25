"""Circuit Breaker for quote providers.

When a provider is down:
- Without a breaker: every ticker in every pass waits for the timeout
- With a breaker: after N consecutive failures the provider is skipped
  (fast fail) until the recovery timeout has passed

State Machine:
CLOSED (normal) → OPEN (failing) → HALF_OPEN (testing) → CLOSED/OPEN
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, TypeVar

from signaldesk.domain.market_data.exceptions import CircuitBreakerOpenError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "CLOSED"  # Normal - calls go through
    OPEN = "OPEN"  # Failing - calls are rejected
    HALF_OPEN = "HALF_OPEN"  # Probing - one call decides


class CircuitBreaker:
    """Per-provider circuit breaker.

    Example:
        >>> breaker = CircuitBreaker("twelvedata", failure_threshold=5, timeout_seconds=60)
        >>> price = await breaker.call(provider.fetch_price, "AAPL")
        >>> # after 5 consecutive failures:
        >>> await breaker.call(provider.fetch_price, "AAPL")  # CircuitBreakerOpenError
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        timeout_seconds: int = 60,
        success_threshold: int = 1,
    ) -> None:
        """Initialize circuit breaker.

        Args:
            name: Provider name, used in log records.
            failure_threshold: Consecutive failures before the circuit opens.
            timeout_seconds: How long the circuit stays OPEN.
            success_threshold: Successes in HALF_OPEN needed to close.
        """
        self.name = name
        self.failure_threshold = failure_threshold
        self.timeout_seconds = timeout_seconds
        self.success_threshold = success_threshold

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._last_failure_time: datetime | None = None

        self._lock = asyncio.Lock()

    @property
    def state(self) -> CircuitState:
        """Get current circuit state."""
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    async def call(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Execute ``func`` through the breaker.

        Returns:
            Result of ``func``.

        Raises:
            CircuitBreakerOpenError: If the circuit is OPEN.
            Exception: Anything ``func`` raises (counted as a failure).
        """
        async with self._lock:
            if self._state == CircuitState.OPEN:
                if self._should_attempt_reset():
                    logger.info(
                        "circuit_breaker.half_open",
                        extra={"provider": self.name, "previous_failures": self._failure_count},
                    )
                    self._state = CircuitState.HALF_OPEN
                    self._success_count = 0
                else:
                    logger.debug(
                        "circuit_breaker.rejected",
                        extra={"provider": self.name, "failure_count": self._failure_count},
                    )
                    raise CircuitBreakerOpenError(
                        "Circuit breaker OPEN, retry later",
                        provider=self.name,
                    )

        try:
            result = await func(*args, **kwargs)
        except Exception:
            async with self._lock:
                self._on_failure()
            raise

        async with self._lock:
            self._on_success()
        return result

    def _on_success(self) -> None:
        if self._state == CircuitState.HALF_OPEN:
            self._success_count += 1

            if self._success_count >= self.success_threshold:
                logger.info(
                    "circuit_breaker.closed",
                    extra={"provider": self.name, "previous_failures": self._failure_count},
                )
                self._state = CircuitState.CLOSED
                self._failure_count = 0
                self._success_count = 0

        elif self._state == CircuitState.CLOSED:
            self._failure_count = 0

    def _on_failure(self) -> None:
        self._failure_count += 1
        self._last_failure_time = datetime.now(timezone.utc)

        if self._state == CircuitState.HALF_OPEN:
            logger.warning(
                "circuit_breaker.reopened",
                extra={"provider": self.name, "failure_count": self._failure_count},
            )
            self._state = CircuitState.OPEN

        elif self._state == CircuitState.CLOSED:
            if self._failure_count >= self.failure_threshold:
                logger.error(
                    "circuit_breaker.opened",
                    extra={
                        "provider": self.name,
                        "failure_count": self._failure_count,
                        "threshold": self.failure_threshold,
                    },
                )
                self._state = CircuitState.OPEN

    def _should_attempt_reset(self) -> bool:
        """Check if circuit should transition OPEN → HALF_OPEN."""
        if self._last_failure_time is None:
            return True

        elapsed = datetime.now(timezone.utc) - self._last_failure_time
        return elapsed >= timedelta(seconds=self.timeout_seconds)

    def reset(self) -> None:
        """Manually reset circuit breaker (for testing/admin)."""
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._last_failure_time = None
        logger.info("circuit_breaker.manual_reset", extra={"provider": self.name})
