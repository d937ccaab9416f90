"""Retry policy for store operations."""

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Tuple, Type

from ...config.settings import AuthzSettings
from ...core.exceptions import TransientStoreError

logger = logging.getLogger(__name__)


class BackoffType(Enum):
    """Types of backoff strategies."""
    
    EXPONENTIAL = "exponential"
    LINEAR = "linear"
    FIXED = "fixed"


@dataclass
class RetryPolicy:
    """Configuration for store retry behavior."""
    
    max_retries: int = 3
    backoff_type: BackoffType = BackoffType.EXPONENTIAL
    initial_delay_ms: int = 50
    max_delay_ms: int = 2000
    jitter: bool = True
    
    def __post_init__(self):
        """Validate retry policy parameters."""
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.initial_delay_ms < 0:
            raise ValueError("initial_delay_ms must be non-negative")
        if self.max_delay_ms < self.initial_delay_ms:
            raise ValueError("max_delay_ms must be >= initial_delay_ms")
    
    def calculate_delay(self, attempt: int) -> int:
        """
        Calculate delay for a retry attempt.
        
        Args:
            attempt: Attempt number (1-based)
            
        Returns:
            Delay in milliseconds
        """
        if attempt <= 0:
            return 0
        
        if self.backoff_type == BackoffType.EXPONENTIAL:
            delay = self.initial_delay_ms * (2 ** (attempt - 1))
        elif self.backoff_type == BackoffType.LINEAR:
            delay = self.initial_delay_ms * attempt
        else:  # FIXED
            delay = self.initial_delay_ms
        
        delay = min(delay, self.max_delay_ms)
        
        # Add jitter to prevent thundering herd
        if self.jitter and delay > 0:
            jitter_range = int(delay * 0.1)  # 10% jitter
            delay += random.randint(-jitter_range, jitter_range)
            delay = max(0, delay)
        
        return delay
    
    def should_retry(self, attempt: int) -> bool:
        """Whether another attempt is allowed after `attempt` failed (1-based)."""
        return attempt <= self.max_retries
    
    @classmethod
    def from_settings(cls, settings: AuthzSettings) -> "RetryPolicy":
        return cls(
            max_retries=settings.retry_max_attempts,
            initial_delay_ms=settings.retry_initial_delay_ms,
            max_delay_ms=max(settings.retry_max_delay_ms, settings.retry_initial_delay_ms),
        )
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RetryPolicy":
        """Create retry policy from dictionary."""
        backoff_type = data.get("backoff_type", "exponential")
        if isinstance(backoff_type, str):
            backoff_type = BackoffType(backoff_type)
        
        return cls(
            max_retries=data.get("max_retries", 3),
            backoff_type=backoff_type,
            initial_delay_ms=data.get("initial_delay_ms", 50),
            max_delay_ms=data.get("max_delay_ms", 2000),
            jitter=data.get("jitter", True),
        )
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert retry policy to dictionary."""
        return {
            "max_retries": self.max_retries,
            "backoff_type": self.backoff_type.value,
            "initial_delay_ms": self.initial_delay_ms,
            "max_delay_ms": self.max_delay_ms,
            "jitter": self.jitter,
        }


NO_RETRY = RetryPolicy(max_retries=0, initial_delay_ms=0, max_delay_ms=0, jitter=False)


async def run_with_retry(
    operation: Callable[[], Awaitable[Any]],
    policy: RetryPolicy,
    description: str = "store operation",
    retry_on: Tuple[Type[BaseException], ...] = (TransientStoreError,),
) -> Any:
    """Run an async operation, retrying retryable failures with backoff.
    
    Non-retryable exceptions propagate immediately. The last retryable
    exception propagates once the policy is exhausted.
    """
    attempt = 0
    while True:
        try:
            return await operation()
        except retry_on as e:
            attempt += 1
            if not policy.should_retry(attempt):
                logger.error(f"{description} failed after {attempt} attempt(s): {e}")
                raise
            delay_ms = policy.calculate_delay(attempt)
            logger.warning(f"{description} failed (attempt {attempt}), retrying in {delay_ms}ms: {e}")
            await asyncio.sleep(delay_ms / 1000)
