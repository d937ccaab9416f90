"""Retry infrastructure."""

from .retry_policy import BackoffType, RetryPolicy, NO_RETRY, run_with_retry

__all__ = ["BackoffType", "RetryPolicy", "NO_RETRY", "run_with_retry"]
