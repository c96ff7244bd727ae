"""Retry logic with exponential backoff and jitter

Optimistic-concurrency retries for progression writes:
1. Only retries StaleStateConflictError (lost compare-and-swap)
2. Re-invokes the whole operation, so caps and multipliers are recomputed
   against freshly loaded state instead of replaying an old delta
3. Uses short exponential backoff with jitter to spread competing writers
4. Gives up after max retries to avoid infinite loops
"""

import asyncio
import random
import logging
from typing import Awaitable, Callable, Any, Optional, TypeVar
from functools import wraps

from nutrio import config
from nutrio.exceptions import StaleStateConflictError

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Retry configuration
MAX_RETRIES = config.STALE_STATE_MAX_RETRIES
BASE_DELAY = 0.01  # seconds
MAX_DELAY = 0.5  # seconds
JITTER = 0.1  # 10% random jitter


def is_retryable_error(exc: Exception) -> bool:
    """
    Determine if an error means "recompute and try again".

    Only lost compare-and-swaps qualify. Validation and catalog errors
    would fail identically on every attempt.
    """
    return isinstance(exc, StaleStateConflictError)


def calculate_backoff(attempt: int) -> float:
    """
    Calculate exponential backoff delay with jitter.

    Formula: delay = min(BASE_DELAY * (2 ** attempt), MAX_DELAY) + jitter

    Example:
        Attempt 0: ~10ms
        Attempt 1: ~20ms
        Attempt 2: ~40ms
    """
    delay = min(BASE_DELAY * (2 ** attempt), MAX_DELAY)

    jitter_amount = random.uniform(-JITTER * delay, JITTER * delay)
    final_delay = delay + jitter_amount

    return max(final_delay, 0.0)


async def retry_with_backoff(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    max_retries: int = MAX_RETRIES,
    on_retry: Optional[Callable[[Exception], None]] = None,
    **kwargs: Any
) -> T:
    """
    Retry async function with exponential backoff.

    Args:
        func: Async function to retry (called fresh on every attempt)
        max_retries: Maximum number of retry attempts
        on_retry: Optional callback invoked with the error before each retry
        *args, **kwargs: Arguments to pass to func

    Returns:
        Result from func

    Raises:
        Last exception if all retries exhausted or non-retryable error

    Example:
        outcome = await retry_with_backoff(self._grant_once, user_id, event)
    """
    for attempt in range(max_retries + 1):
        try:
            return await func(*args, **kwargs)

        except Exception as e:
            if not is_retryable_error(e):
                raise

            if attempt == max_retries:
                logger.error(
                    f"[RETRY] All {max_retries} retries exhausted for {func.__name__}"
                )
                raise

            if on_retry is not None:
                on_retry(e)

            backoff = calculate_backoff(attempt)
            logger.info(
                f"[RETRY] Attempt {attempt + 1}/{max_retries} for {func.__name__} "
                f"after {backoff:.3f}s (error: {type(e).__name__})"
            )

            await asyncio.sleep(backoff)

    raise RuntimeError("Retry logic failed unexpectedly")


def with_retry(max_retries: int = MAX_RETRIES) -> Callable:
    """
    Decorator to add stale-state retry logic to async functions.

    Example:
        @with_retry(max_retries=3)
        async def grant():
            ...
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await retry_with_backoff(func, *args, max_retries=max_retries, **kwargs)
        return wrapper
    return decorator
