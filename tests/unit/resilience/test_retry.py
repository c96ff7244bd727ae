"""Unit tests for stale-state retry logic"""
import pytest

from nutrio.exceptions import StaleStateConflictError, UnknownSourceError
from nutrio.resilience.retry import (
    retry_with_backoff,
    with_retry,
    is_retryable_error,
    calculate_backoff,
    MAX_DELAY,
)


def test_is_retryable_error_stale_state():
    """Lost compare-and-swaps are retryable"""
    assert is_retryable_error(StaleStateConflictError(expected_version=1, actual_version=2)) == True


def test_is_retryable_error_non_retryable():
    """Input and catalog errors would fail the same way again"""
    assert is_retryable_error(ValueError("Bad value")) == False
    assert is_retryable_error(UnknownSourceError("nope")) == False
    assert is_retryable_error(KeyError("Missing key")) == False


def test_calculate_backoff():
    """Test exponential backoff calculation"""
    delay_0 = calculate_backoff(0)
    assert 0.009 <= delay_0 <= 0.011  # 10ms ± 10% jitter

    delay_1 = calculate_backoff(1)
    assert 0.018 <= delay_1 <= 0.022

    delay_2 = calculate_backoff(2)
    assert 0.036 <= delay_2 <= 0.044

    assert delay_1 > delay_0
    assert delay_2 > delay_1


def test_calculate_backoff_max_delay():
    """Test that backoff respects max delay"""
    delay = calculate_backoff(20)
    assert delay <= MAX_DELAY * 1.1


@pytest.mark.asyncio
async def test_retry_with_backoff_success_first_try():
    """Test that function succeeds on first try"""

    call_count = 0

    async def successful_function():
        nonlocal call_count
        call_count += 1
        return "success"

    result = await retry_with_backoff(successful_function, max_retries=3)

    assert result == "success"
    assert call_count == 1


@pytest.mark.asyncio
async def test_retry_with_backoff_success_after_conflicts():
    """Test that the operation is re-run after lost compare-and-swaps"""

    attempt = 0
    conflicts = []

    async def flaky_function():
        nonlocal attempt
        attempt += 1
        if attempt < 3:
            raise StaleStateConflictError(expected_version=attempt, actual_version=attempt + 1)
        return "success"

    result = await retry_with_backoff(flaky_function, max_retries=3, on_retry=conflicts.append)

    assert result == "success"
    assert attempt == 3
    assert len(conflicts) == 2


@pytest.mark.asyncio
async def test_retry_with_backoff_exhausted():
    """Test that retries are exhausted for persistent conflicts"""

    attempt = 0

    async def always_stale():
        nonlocal attempt
        attempt += 1
        raise StaleStateConflictError(expected_version=0, actual_version=1)

    with pytest.raises(StaleStateConflictError):
        await retry_with_backoff(always_stale, max_retries=3)

    # Initial call + 3 retries
    assert attempt == 4


@pytest.mark.asyncio
async def test_retry_with_backoff_non_retryable_error():
    """Test that non-retryable errors are not retried"""

    attempt = 0

    async def bad_input():
        nonlocal attempt
        attempt += 1
        raise UnknownSourceError("sleep_well")

    with pytest.raises(UnknownSourceError):
        await retry_with_backoff(bad_input, max_retries=3)

    assert attempt == 1


@pytest.mark.asyncio
async def test_with_retry_decorator():
    """Test the decorator form"""

    attempt = 0

    @with_retry(max_retries=2)
    async def decorated(value):
        nonlocal attempt
        attempt += 1
        if attempt == 1:
            raise StaleStateConflictError()
        return value * 2

    assert await decorated(21) == 42
    assert attempt == 2
    assert decorated.__name__ == "decorated"
