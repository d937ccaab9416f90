"""Tests for the retry policy."""

from unittest.mock import AsyncMock

import pytest

from neo_authz.config.settings import AuthzSettings
from neo_authz.core.exceptions import DatabaseError, TransientStoreError
from neo_authz.infrastructure.retry import NO_RETRY, BackoffType, RetryPolicy, run_with_retry


class TestRetryPolicy:
    """Test delay calculation and construction."""

    def test_exponential_backoff(self):
        policy = RetryPolicy(initial_delay_ms=100, max_delay_ms=300, jitter=False)

        assert [policy.calculate_delay(a) for a in (0, 1, 2, 3)] == [0, 100, 200, 300]

    def test_linear_and_fixed_backoff(self):
        linear = RetryPolicy(backoff_type=BackoffType.LINEAR, initial_delay_ms=100, max_delay_ms=1000, jitter=False)
        fixed = RetryPolicy(backoff_type=BackoffType.FIXED, initial_delay_ms=100, max_delay_ms=1000, jitter=False)

        assert linear.calculate_delay(3) == 300
        assert fixed.calculate_delay(3) == 100

    def test_jitter_stays_within_ten_percent(self):
        policy = RetryPolicy(initial_delay_ms=1000, max_delay_ms=1000, jitter=True)

        for _ in range(20):
            assert 900 <= policy.calculate_delay(1) <= 1100

    def test_should_retry(self):
        policy = RetryPolicy(max_retries=2)

        assert policy.should_retry(1)
        assert policy.should_retry(2)
        assert not policy.should_retry(3)
        assert not NO_RETRY.should_retry(1)

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_retries": -1}, {"initial_delay_ms": -1}, {"initial_delay_ms": 500, "max_delay_ms": 100}],
    )
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(ValueError):
            RetryPolicy(**kwargs)

    def test_dict_round_trip(self):
        policy = RetryPolicy.from_dict({"max_retries": 5, "backoff_type": "linear", "jitter": False})

        assert policy.backoff_type == BackoffType.LINEAR
        assert RetryPolicy.from_dict(policy.to_dict()) == policy

    def test_from_settings(self):
        settings = AuthzSettings(_env_file=None, retry_max_attempts=1, retry_initial_delay_ms=10, retry_max_delay_ms=5)

        policy = RetryPolicy.from_settings(settings)

        assert policy.max_retries == 1
        assert policy.max_delay_ms == 10


class TestRunWithRetry:
    """Test the retry loop."""

    @pytest.fixture
    def policy(self):
        return RetryPolicy(max_retries=2, initial_delay_ms=0, max_delay_ms=0, jitter=False)

    @pytest.mark.asyncio
    async def test_succeeds_after_transient_failures(self, policy):
        operation = AsyncMock(side_effect=[TransientStoreError("a"), TransientStoreError("b"), "ok"])

        assert await run_with_retry(operation, policy) == "ok"
        assert operation.call_count == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self, policy):
        operation = AsyncMock(side_effect=TransientStoreError("down"))

        with pytest.raises(TransientStoreError):
            await run_with_retry(operation, policy)
        assert operation.call_count == 3

    @pytest.mark.asyncio
    async def test_other_errors_are_not_retried(self, policy):
        operation = AsyncMock(side_effect=DatabaseError("constraint violated"))

        with pytest.raises(DatabaseError):
            await run_with_retry(operation, policy)
        assert operation.call_count == 1

    @pytest.mark.asyncio
    async def test_custom_retryable_errors(self, policy):
        operation = AsyncMock(side_effect=[KeyError("x"), 42])

        assert await run_with_retry(operation, policy, retry_on=(KeyError,)) == 42
