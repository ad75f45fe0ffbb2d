"""Rate limiting and retry logic for page requests."""

import random
import time
from collections.abc import Callable
from typing import TypeVar

import structlog

from nba_highlights.utils.config import get_settings

logger = structlog.get_logger(__name__)
T = TypeVar("T")


class RateLimiter:
    """Token bucket rate limiter for page requests."""

    def __init__(self, rate: int, per: float = 60.0):
        """
        Initialize rate limiter.

        Args:
            rate: Number of requests allowed.
            per: Time period in seconds (default: 60).
        """
        self.rate = rate
        self.per = per
        self.allowance = float(rate)
        self.last_check = time.monotonic()

    def acquire(self, block: bool = True) -> bool:
        """
        Take one token from the bucket.

        Args:
            block: If True, sleep until a token is available.

        Returns:
            True if the request may proceed, False if not blocking and empty.
        """
        now = time.monotonic()
        self.allowance = min(
            self.rate, self.allowance + (now - self.last_check) * (self.rate / self.per)
        )
        self.last_check = now

        if self.allowance >= 1.0:
            self.allowance -= 1.0
            return True

        if not block:
            return False

        # Wait for one token to refill, with ±20% jitter
        sleep_time = (1.0 - self.allowance) * (self.per / self.rate)
        sleep_time *= random.uniform(0.8, 1.2)  # noqa: S311
        logger.debug("Rate limit reached, sleeping", sleep_time=sleep_time)
        time.sleep(sleep_time)
        self.allowance = 0.0
        self.last_check = time.monotonic()
        return True


def retry_with_backoff(
    func: Callable[[], T],
    max_attempts: int | None = None,
    base_delay: float | None = None,
    exceptions: tuple[type[Exception], ...] = (Exception,),
) -> T:
    """
    Retry a function with exponential backoff and jitter.

    Args:
        func: Zero-argument callable to retry.
        max_attempts: Maximum number of attempts. If None, uses settings.
        base_delay: Base delay in seconds. If None, uses settings.
        exceptions: Exception types to catch and retry on.

    Returns:
        Return value of func on success.

    Raises:
        The last exception if all attempts fail.
    """
    settings = get_settings()
    max_attempts = max_attempts or settings.request_retry_attempts
    base_delay = settings.request_retry_delay if base_delay is None else base_delay
    name = getattr(func, "__name__", repr(func))

    for attempt in range(1, max_attempts + 1):
        try:
            return func()
        except exceptions as e:
            if attempt == max_attempts:
                logger.error("All retry attempts failed", func=name, attempts=attempt, error=str(e))
                raise

            delay = base_delay * (2 ** (attempt - 1)) * random.uniform(0.8, 1.2)  # noqa: S311
            logger.warning(
                "Request failed, retrying",
                func=name,
                attempt=attempt,
                max_attempts=max_attempts,
                delay=delay,
                error=str(e),
            )
            time.sleep(delay)

    raise RuntimeError("Retry logic exhausted without result")
