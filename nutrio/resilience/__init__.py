"""Resilience patterns for progression writes

Optimistic-concurrency retry with backoff for lost compare-and-swaps.
"""

from nutrio.resilience.retry import retry_with_backoff, with_retry, is_retryable_error

__all__ = [
    "retry_with_backoff",
    "with_retry",
    "is_retryable_error",
]
