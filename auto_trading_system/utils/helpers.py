"""Assorted helper functions."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

T = TypeVar('T')

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff: ``base_delay * 2 ** (attempt - 1)`` between attempts."""

    max_attempts: int = 3
    base_delay: float = 1.0
    attempt_timeout: Optional[float] = None
    exceptions: Tuple[Type[BaseException], ...] = (Exception,)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError('max_attempts must be at least 1')
        if self.base_delay < 0:
            raise ValueError('base_delay must not be negative')

    def backoff(self, attempt: int) -> float:
        return self.base_delay * (2 ** (attempt - 1))

    async def run(
        self,
        func: Callable[[], Awaitable[T]],
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> T:
        """Await ``func`` until it succeeds or attempts are exhausted."""

        retryable = self.exceptions + (asyncio.TimeoutError,)
        for attempt in range(1, self.max_attempts + 1):
            try:
                if self.attempt_timeout is None:
                    return await func()
                return await asyncio.wait_for(func(), timeout=self.attempt_timeout)
            except retryable as error:
                if attempt >= self.max_attempts:
                    raise
                delay = self.backoff(attempt)
                logger.info(
                    'Retrying after error (attempt %d/%d) in %.2fs: %s',
                    attempt,
                    self.max_attempts,
                    delay,
                    error,
                )
                await sleep(delay)
        raise AssertionError('unreachable')  # pragma: no cover


def clamp01(value: float) -> float:
    """Clamp ``value`` into ``[0, 1]``; NaN maps to 0."""
    if value != value:
        return 0.0
    return max(0.0, min(1.0, value))


__all__ = ['RetryPolicy', 'clamp01']
