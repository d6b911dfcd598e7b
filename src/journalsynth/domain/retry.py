"""Bounded retries for collaborator store calls."""

import logging
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

from journalsynth.domain.errors import StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retry behavior."""

    max_attempts: int = 3
    base_delay: float = 0.2  # seconds
    max_delay: float = 2.0  # seconds
    exponential_base: float = 2.0

    def get_delay(self, attempt: int) -> float:
        """Calculate delay after a failed attempt (exponential backoff)."""
        delay = self.base_delay * (self.exponential_base ** attempt)
        return min(delay, self.max_delay)


def call_with_retry(
    operation: Callable[[], T],
    policy: RetryPolicy,
    description: str,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run a store call, retrying StoreError up to the policy's attempt count.

    Other errors propagate immediately. The last StoreError is re-raised
    once attempts run out.
    """
    attempts = max(1, policy.max_attempts)
    for attempt in range(attempts):
        try:
            return operation()
        except StoreError as e:
            if attempt + 1 >= attempts:
                logger.error("%s failed after %d attempts: %s", description, attempts, e)
                raise
            delay = policy.get_delay(attempt)
            logger.warning(
                "%s failed, retrying in %.1fs (attempt %d/%d): %s",
                description,
                delay,
                attempt + 1,
                attempts,
                e,
            )
            sleep(delay)
