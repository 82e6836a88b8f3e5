from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar

from collab_hunter.common.config import Settings
from collab_hunter.common.errors import RETRYABLE_ERRORS
from collab_hunter.common.logging_utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry a fallible async operation with exponential backoff.

    Waits `base_delay * 2**attempt` between attempts (attempt counted from 0)
    and re-raises the last error once `max_attempts` calls have failed.
    Errors outside `retry_on` propagate immediately.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    retry_on: Tuple[Type[BaseException], ...] = RETRYABLE_ERRORS
    sleep: Sleep = asyncio.sleep

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(max_attempts=settings.max_attempts, base_delay=settings.retry_base_delay)

    @classmethod
    def single_attempt(cls) -> "RetryPolicy":
        return cls(max_attempts=1, base_delay=0.0)

    def delay_for(self, attempt: int) -> float:
        return self.base_delay * (2 ** attempt)

    async def run(self, operation: Callable[[], Awaitable[T]], *, label: str = "operation") -> T:
        attempts = max(1, self.max_attempts)
        last_error: Optional[BaseException] = None

        for attempt in range(attempts):
            try:
                return await operation()
            except self.retry_on as e:
                last_error = e
                if attempt + 1 >= attempts:
                    break
                delay = self.delay_for(attempt)
                logger.warning(
                    f"{label} attempt {attempt + 1}/{attempts} failed "
                    f"({type(e).__name__}: {e}); retrying in {delay:.1f}s"
                )
                await self.sleep(delay)

        logger.error(f"{label} gave up after {attempts} attempt(s): {last_error}")
        assert last_error is not None
        raise last_error
