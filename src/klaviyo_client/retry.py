"""Retry classification and exponential backoff for the Klaviyo client."""

import random
from dataclasses import dataclass
from typing import Optional, Callable, Any, Dict, FrozenSet

import httpx
from tenacity import (
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
)


RATE_LIMITED_STATUS = 429
SERVER_ERROR_STATUSES: FrozenSet[int] = frozenset(range(500, 600))


@dataclass
class RetryDecision:
    """Decision on whether to retry a request."""
    should_retry: bool
    delay: float = 0.0
    reason: str = ""


@dataclass
class ExponentialBackoff:
    """Exponential backoff configuration with optional jitter.

    Delays grow with every retry and are uncapped unless ``max_delay`` is
    set. Jitter is kept small enough that consecutive delays never overlap.
    Once the cap is reached the delay stays at ``max_delay`` unjittered, so
    capped sequences are non-decreasing rather than strictly increasing.
    """

    initial_delay: float = 1.0
    max_delay: Optional[float] = None
    multiplier: float = 2.0
    jitter: bool = False
    jitter_ratio: float = 0.1

    def __post_init__(self) -> None:
        if self.initial_delay <= 0:
            raise ValueError("initial_delay must be positive")
        if self.multiplier <= 1:
            raise ValueError("multiplier must be greater than 1")
        if self.jitter:
            low = self.multiplier * (1 - self.jitter_ratio)
            if not 0 <= self.jitter_ratio < 1 or low <= 1 + self.jitter_ratio:
                raise ValueError(
                    "jitter_ratio is too large for the multiplier; "
                    "consecutive delays would overlap"
                )

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay for a given attempt number.

        Args:
            attempt: The retry number (1-indexed, first retry is 1).

        Returns:
            Delay in seconds.
        """
        delay = self.initial_delay * (self.multiplier ** (attempt - 1))
        if self.max_delay is not None and delay >= self.max_delay:
            return self.max_delay

        if self.jitter:
            jitter_range = delay * self.jitter_ratio
            delay += random.uniform(-jitter_range, jitter_range)
            delay = max(0, delay)

        if self.max_delay is not None:
            delay = min(delay, self.max_delay)

        return delay

    def __call__(self, retry_state: RetryCallState) -> float:
        return self.calculate_delay(retry_state.attempt_number)


def is_network_error(error: BaseException) -> bool:
    """Check if the request failed before any response was received.

    A server that drops the connection before answering surfaces as
    ``RemoteProtocolError`` and counts as a network failure. Read, write and
    pool timeouts are excluded: the remote side may already have processed
    the request.
    """
    return isinstance(
        error,
        (httpx.NetworkError, httpx.ConnectTimeout, httpx.RemoteProtocolError),
    )


def is_retryable_status(status_code: int) -> bool:
    """Check if a received HTTP status code should trigger a retry.

    Args:
        status_code: HTTP status code.

    Returns:
        True for 429 and any 5xx.
    """
    return status_code == RATE_LIMITED_STATUS or status_code in SERVER_ERROR_STATUSES


def is_error_retryable(error: BaseException) -> bool:
    """Decide whether a failed exchange may be retried.

    Args:
        error: The exception raised by the exchange.

    Returns:
        True for network failures, 5xx and 429 responses.
    """
    if is_network_error(error):
        return True

    if not isinstance(error, httpx.HTTPStatusError):
        # No response to inspect
        return False

    return is_retryable_status(error.response.status_code)


def decide_retry(
    error: BaseException,
    attempt: int,
    retry_count: int,
    backoff: Optional[ExponentialBackoff] = None,
) -> RetryDecision:
    """Build the retry decision for a failed attempt.

    Args:
        error: The exception raised by the exchange.
        attempt: Retry number that would follow (1-indexed).
        retry_count: Maximum number of retries after the first try.
        backoff: Backoff configuration.

    Returns:
        The decision, with a delay when retrying.
    """
    if not is_error_retryable(error):
        return RetryDecision(should_retry=False, reason="not retryable")

    if attempt > retry_count:
        return RetryDecision(should_retry=False, reason="retries exhausted")

    backoff = backoff or ExponentialBackoff()
    return RetryDecision(
        should_retry=True,
        delay=backoff.calculate_delay(attempt),
        reason=_describe_error(error),
    )


def _describe_error(error: BaseException) -> str:
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code}"
    return type(error).__name__


def build_retry_kwargs(
    retry_count: int,
    backoff: ExponentialBackoff,
    sleep: Optional[Callable[[float], Any]] = None,
    before_sleep: Optional[Callable[[RetryCallState], Any]] = None,
) -> Dict[str, Any]:
    """Build keyword arguments for ``tenacity.Retrying``/``AsyncRetrying``.

    The original exception is re-raised once retries stop.
    """
    kwargs: Dict[str, Any] = {
        "stop": stop_after_attempt(retry_count + 1),
        "wait": backoff,
        "retry": retry_if_exception(is_error_retryable),
        "reraise": True,
    }
    if sleep is not None:
        kwargs["sleep"] = sleep
    if before_sleep is not None:
        kwargs["before_sleep"] = before_sleep
    return kwargs
