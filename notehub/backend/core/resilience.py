"""
Resilience Policies for the Redis Change Relay.

Publishing a change delta to Redis is wrapped outside-in:

    circuit breaker (aiobreaker) -> retry (tenacity) -> broker.publish

Both are built from events.yaml. While the breaker is open, publishes fail
fast and the publisher falls back to delivering into the local hub.
"""

from datetime import timedelta
from typing import Any

import aiobreaker
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from notehub.backend.core.config_schema import EventCircuitBreakerSchema, EventRetrySchema
from notehub.backend.core.logging import get_logger

logger = get_logger(__name__)

RELAY_DEPENDENCY = "redis-change-relay"

# Transient transport failures; anything else is not worth a second attempt
RETRYABLE_ERRORS = (ConnectionError, TimeoutError, RedisConnectionError, RedisTimeoutError)


class BreakerLogger(aiobreaker.CircuitBreakerListener):
    """Logs state transitions and recorded failures of one breaker."""

    def __init__(self, dependency: str) -> None:
        self.dependency = dependency

    def state_change(self, cb: aiobreaker.CircuitBreaker, old_state: Any, new_state: Any) -> None:
        opened = str(new_state).lower() == "open"
        (logger.error if opened else logger.info)(
            f"Circuit breaker {self.dependency}: {old_state} -> {new_state}",
            extra={
                "resilience_event": "circuit_breaker_state_change",
                "dependency": self.dependency,
                "failure_count": cb.fail_counter,
            },
        )

    def failure(self, cb: aiobreaker.CircuitBreaker, exception: Exception) -> None:
        logger.warning(
            f"Circuit breaker {self.dependency}: failure recorded",
            extra={
                "resilience_event": "circuit_breaker_failure",
                "dependency": self.dependency,
                "failure_count": cb.fail_counter,
                "error": str(exception),
            },
        )


def log_retry(retry_state: RetryCallState) -> None:
    error = None
    if retry_state.outcome is not None and retry_state.outcome.failed:
        error = str(retry_state.outcome.exception())

    logger.warning(
        f"Retrying relay publish (attempt {retry_state.attempt_number})",
        extra={
            "resilience_event": "retry_attempt",
            "dependency": RELAY_DEPENDENCY,
            "attempt": retry_state.attempt_number,
            "error": error,
        },
    )


def relay_circuit_breaker(config: EventCircuitBreakerSchema) -> aiobreaker.CircuitBreaker:
    return aiobreaker.CircuitBreaker(
        fail_max=config.fail_max,
        timeout_duration=timedelta(seconds=config.timeout_duration),
        listeners=[BreakerLogger(RELAY_DEPENDENCY)],
    )


def relay_retrying(config: EventRetrySchema) -> AsyncRetrying:
    """
    Retry policy for a single relay publish.

    The last error is re-raised once attempts run out, so the breaker
    counts one failure per publish rather than one per attempt.
    """
    return AsyncRetrying(
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_exponential(multiplier=config.backoff_multiplier, max=config.backoff_max),
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        before_sleep=log_retry,
        reraise=True,
    )
