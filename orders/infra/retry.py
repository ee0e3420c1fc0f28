"""
Retry utilities with exponential backoff and jitter.
"""
from __future__ import annotations

import logging
import random
import time
from functools import wraps
from typing import Any, Callable, TypeVar

from django.db import InterfaceError, OperationalError

from orders.domain.exceptions import TransientPersistenceError


logger = logging.getLogger(__name__)

T = TypeVar('T')

TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    TransientPersistenceError,
    OperationalError,
    InterfaceError,
)


class RetryPolicy:
    """
    Bounded retry with exponential backoff and jitter.

    Args:
        max_attempts: Total number of attempts, including the first one
        base_delay: Delay in seconds before the second attempt
        multiplier: Base for exponential backoff
        max_delay: Maximum delay in seconds
        jitter: Whether to add random jitter (0 to 25%) to the delay
        retry_on: Tuple of exceptions to catch and retry
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        multiplier: float = 2.0,
        max_delay: float = 30.0,
        jitter: bool = True,
        retry_on: tuple = TRANSIENT_ERRORS,
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1: {max_attempts}")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.multiplier = multiplier
        self.max_delay = max_delay
        self.jitter = jitter
        self.retry_on = retry_on

    def delay_for(self, attempt: int) -> float:
        """Delay to wait after the given (1-based) failed attempt."""
        delay = self.base_delay * (self.multiplier ** (attempt - 1))
        if self.jitter:
            delay += delay * 0.25 * random.random()
        return min(delay, self.max_delay)

    def call(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        attempt = 1
        while True:
            try:
                return func(*args, **kwargs)
            except self.retry_on as e:
                if attempt >= self.max_attempts:
                    logger.error(
                        "retry_exhausted",
                        extra={
                            "operation": getattr(func, "__name__", repr(func)),
                            "attempt": attempt,
                            "error": str(e),
                        },
                    )
                    raise

                delay = self.delay_for(attempt)
                logger.warning(
                    "retrying_after_transient_error",
                    extra={
                        "operation": getattr(func, "__name__", repr(func)),
                        "attempt": attempt,
                        "delay": round(delay, 3),
                        "error": str(e),
                    },
                )
                if delay > 0:
                    time.sleep(delay)
                attempt += 1


def retry_with_backoff(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    multiplier: float = 2.0,
    max_delay: float = 30.0,
    jitter: bool = True,
    retry_on: tuple = TRANSIENT_ERRORS,
):
    """Decorator for retrying functions with exponential backoff and jitter."""
    policy = RetryPolicy(
        max_attempts=max_attempts,
        base_delay=base_delay,
        multiplier=multiplier,
        max_delay=max_delay,
        jitter=jitter,
        retry_on=retry_on,
    )

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            return policy.call(func, *args, **kwargs)

        return wrapper
    return decorator
