"""Retry handler for activity classifier calls with circuit breaker pattern."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from pydantic_ai.exceptions import ModelRetry, UnexpectedModelBehavior


logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_DELAY_SECONDS = 30.0

# Checked first: a 401 mentioning "timeout" is still an auth failure
_NON_RETRYABLE_PHRASES = (
    "authentication failed",
    "invalid api key",
    "unauthorized",
    "invalid token",
    "credential not configured",
    "401",
    "403",
    "bad request",
    "400",
    "404",
    "not found",
)
_NON_RETRYABLE_TYPES = frozenset({"AuthenticationError", "PermissionError", "ValueError", "KeyError"})

_RETRYABLE_PHRASES = (
    "rate limit",
    "too many requests",
    "rate_limit_exceeded",
    "throttled",
    "429",
    "service unavailable",
    "overloaded",
    "500",
    "502",
    "503",
    "504",
    "timeout",
    "timed out",
    "connection",
    "network",
    "unreachable",
)
_RETRYABLE_TYPES = frozenset({"ConnectionError", "TimeoutError", "ReadTimeout", "ConnectTimeout"})


class ErrorRetryability(Enum):
    """Classification of whether an error should be retried."""

    RETRYABLE = "retryable"
    NON_RETRYABLE = "non_retryable"


class CircuitOpenError(RuntimeError):
    """Raised when the circuit breaker rejects a classifier call."""


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_attempts: int = 3
    base_delay: float = 1.0
    backoff_multiplier: float = 2.0
    circuit_breaker_threshold: int = 5
    circuit_breaker_cooldown: float = 60.0


class CircuitBreakerState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"  # classifier calls rejected until the cooldown passes
    HALF_OPEN = "half_open"  # next call decides whether to close again


@dataclass
class CircuitBreaker:
    """Stops calling the classifier after repeated failures until a cooldown passes."""

    threshold: int = 5
    cooldown: float = 60.0
    failure_count: int = 0
    opened_at: float = 0.0
    state: CircuitBreakerState = CircuitBreakerState.CLOSED

    def record_success(self) -> None:
        self.failure_count = 0
        self.state = CircuitBreakerState.CLOSED

    def record_failure(self) -> None:
        """Count a failed call; the circuit opens once the threshold is reached."""
        self.failure_count += 1
        self.opened_at = time.monotonic()
        if self.failure_count < self.threshold:
            return

        self.state = CircuitBreakerState.OPEN
        logger.warning("circuit_breaker_opened", extra={"failures": self.failure_count, "cooldown": self.cooldown})

    def can_attempt(self) -> bool:
        """Return whether a classifier call may go ahead, half-opening after the cooldown."""
        if self.state is not CircuitBreakerState.OPEN:
            return True
        if time.monotonic() - self.opened_at < self.cooldown:
            return False

        self.state = CircuitBreakerState.HALF_OPEN
        logger.info("circuit_breaker_half_open")
        return True


class ClassifierRetryHandler:
    """Retries transient classifier failures with exponential backoff."""

    def __init__(self, config: RetryConfig | None = None) -> None:
        self.config = config or RetryConfig()
        self.circuit_breaker = CircuitBreaker(self.config.circuit_breaker_threshold, self.config.circuit_breaker_cooldown)

    def classify_error(self, exception: Exception) -> ErrorRetryability:
        """Classify an error to determine if it should be retried.

        Auth, validation and not-found errors fail fast. Rate limits, transient
        upstream errors, network problems, timeouts and model misbehaviour
        (e.g. output that failed validation) are retried. Anything else is not
        retried.

        Args:
            exception: The exception to classify

        Returns:
            ErrorRetryability indicating if the error is retryable
        """
        error_str = str(exception).lower()
        exception_type = type(exception).__name__

        if exception_type in _NON_RETRYABLE_TYPES or any(phrase in error_str for phrase in _NON_RETRYABLE_PHRASES):
            return ErrorRetryability.NON_RETRYABLE

        if isinstance(exception, ModelRetry | UnexpectedModelBehavior | TimeoutError):
            return ErrorRetryability.RETRYABLE

        if exception_type in _RETRYABLE_TYPES or any(phrase in error_str for phrase in _RETRYABLE_PHRASES):
            return ErrorRetryability.RETRYABLE

        return ErrorRetryability.NON_RETRYABLE

    def calculate_delay(self, attempt: int) -> float:
        """Calculate exponential backoff delay for the given attempt (0-indexed), in seconds."""
        delay = self.config.base_delay * (self.config.backoff_multiplier**attempt)
        return min(delay, MAX_DELAY_SECONDS)

    async def execute_with_retry(self, func: Callable[[], Awaitable[T]]) -> T:
        """Execute a classifier call with retry logic.

        Args:
            func: Zero-argument coroutine function performing the call

        Returns:
            The result of the call

        Raises:
            CircuitOpenError: If the circuit breaker is open
            Exception: The last error once retries are exhausted, or the first non-retryable error
        """
        max_attempts = max(self.config.max_attempts, 1)
        for attempt in range(1, max_attempts + 1):
            if not self.circuit_breaker.can_attempt():
                logger.warning("circuit_breaker_blocked", extra={"attempt": attempt})
                raise CircuitOpenError("Circuit breaker is open. Activity analysis temporarily unavailable.")

            try:
                result = await func()
            except Exception as e:
                retryable = self.classify_error(e) is ErrorRetryability.RETRYABLE
                logger.warning(
                    "classifier_error",
                    extra={
                        "attempt": attempt,
                        "max_attempts": max_attempts,
                        "error_type": type(e).__name__,
                        "error": str(e),
                        "retryable": retryable,
                    },
                )
                if not retryable or attempt == max_attempts:
                    event = "classifier_retry_exhausted" if retryable else "classifier_retry_skipped"
                    logger.error(event, extra={"attempts": attempt, "error_type": type(e).__name__})
                    self.circuit_breaker.record_failure()
                    raise

                delay = self.calculate_delay(attempt - 1)
                logger.info("classifier_retry", extra={"next_attempt": attempt + 1, "delay_seconds": delay})
                await asyncio.sleep(delay)
                continue

            self.circuit_breaker.record_success()
            if attempt > 1:
                logger.info("classifier_retry_success", extra={"attempts": attempt})
            return result

        raise AssertionError("unreachable")


class _RetryHandlerState:
    """Singleton state for the shared retry handler."""

    instance: ClassifierRetryHandler | None = None


def get_retry_handler() -> ClassifierRetryHandler:
    """Get or create the shared retry handler instance."""
    if _RetryHandlerState.instance is None:
        _RetryHandlerState.instance = ClassifierRetryHandler()
    return _RetryHandlerState.instance
