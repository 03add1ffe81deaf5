"""Retry policy for outgoing requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .exceptions import OdosError, OdosValidationError

logger = logging.getLogger(__name__)

RetryPredicate = Callable[[OdosError], bool]


@dataclass(frozen=True)
class RetryConfig:
    """How a request is retried.

    ``max_retries`` is the total number of attempts, the first one included:
    with ``max_retries=3`` a request that keeps failing is sent three times.
    ``retry_predicate`` replaces the default eligibility rules when set, but
    rate limits are never retried whatever it returns.
    """

    max_retries: int = 3
    initial_backoff: float = 0.1
    retry_server_errors: bool = True
    max_backoff: float | None = None
    retry_predicate: RetryPredicate | None = None

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            raise OdosValidationError("max_retries must be at least 1 (it counts the first attempt)")
        if self.initial_backoff < 0:
            raise OdosValidationError("initial_backoff must be non-negative")
        if self.max_backoff is not None and self.max_backoff < 0:
            raise OdosValidationError("max_backoff must be non-negative")

    @property
    def max_attempts(self) -> int:
        return self.max_retries

    @classmethod
    def default(cls) -> "RetryConfig":
        return cls()

    @classmethod
    def conservative(cls) -> "RetryConfig":
        """Retry network failures and timeouts only."""
        return cls(retry_server_errors=False)

    @classmethod
    def no_retries(cls) -> "RetryConfig":
        """Send every request exactly once."""
        return cls(max_retries=1)


class RetryPolicy:
    """Decides, per failed attempt, whether to try again and how long to wait.

    The policy holds only configuration, so one instance serves any number of
    concurrent requests; each request counts its own attempts from 1.
    """

    def __init__(self, config: RetryConfig | None = None) -> None:
        self.config = config or RetryConfig()

    def should_retry(self, error: OdosError, attempt: int) -> bool:
        if error.is_rate_limit():
            return False
        if attempt >= self.config.max_retries:
            return False
        if self.config.retry_predicate is not None:
            return bool(self.config.retry_predicate(error))
        return error.is_retryable(retry_server_errors=self.config.retry_server_errors)

    def backoff_delay(self, attempt: int) -> float:
        """Delay after failed attempt ``attempt``: ``initial * 2 ** (attempt - 1)``."""
        delay = self.config.initial_backoff * (2 ** max(0, attempt - 1))
        if self.config.max_backoff is not None:
            delay = min(delay, self.config.max_backoff)
        return delay

    def next_delay(self, error: OdosError, attempt: int) -> float | None:
        """Backoff before the next attempt, or None when ``error`` is terminal."""
        if not self.should_retry(error, attempt):
            logger.debug(f"Giving up after attempt {attempt}: {error.kind} {error}")
            return None
        delay = self.backoff_delay(attempt)
        logger.warning(f"Attempt {attempt} failed ({error.kind}), retrying in {delay:.3f}s: {error}")
        return delay
