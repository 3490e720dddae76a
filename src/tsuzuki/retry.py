"""Retry strategies for steps.

The engine never retries on its own. Retry is opted into per step: a
retrying step re-invokes the wrapped function, producing a fresh handle on
each attempt. Only exceptions matching the user's retry filter are retried.
"""

from __future__ import annotations

import asyncio
import functools
import random
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from tsuzuki.errors import StepError
from tsuzuki.handles import settle


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for step retry behavior.

    Attributes:
        max_attempts: Total attempts including the first try. Default 1 (no retry).
        delay_seconds: Base delay between retries. Default 1.0.
        backoff_factor: Multiplier applied to delay after each retry. Default 2.0.
        jitter: If True, add random jitter to delay. Default True.
        max_delay_seconds: Cap on delay between retries. Default 60.0.
        retry_on: Optional callable that receives the exception and returns True
                  if the step should be retried. Default: retry on all exceptions.
    """

    max_attempts: int = 1
    delay_seconds: float = 1.0
    backoff_factor: float = 2.0
    jitter: bool = True
    max_delay_seconds: float = 60.0
    retry_on: Callable[[Exception], bool] | None = None

    def should_retry(self, error: Exception) -> bool:
        if self.retry_on is None:
            return True
        return self.retry_on(error)

    def get_delay(self, attempt: int) -> float:
        """Calculate delay for the given attempt number (0-indexed)."""
        delay = self.delay_seconds * (self.backoff_factor**attempt)
        delay = min(delay, self.max_delay_seconds)
        if self.jitter:
            delay = delay * (0.5 + random.random() * 0.5)
        return delay


def retrying(
    fn: Callable[[Any], Any],
    config: RetryConfig,
    *,
    name: str | None = None,
) -> Callable[[Any], Any]:
    """Wrap a step function so failed attempts are re-invoked.

    The returned function is async, so a sequence sees it as a step that
    always produces a handle. Synchronous raises and rejected handles both
    count as a failed attempt.

    Raises:
        StepError: If all attempts fail, or the filter rejects the error.
    """
    step_name = name or getattr(fn, "__name__", repr(fn))

    @functools.wraps(fn)
    async def attempt_all(value: Any) -> Any:
        for attempt in range(config.max_attempts):
            try:
                return await settle(fn(value))
            except Exception as e:
                is_last_attempt = attempt >= config.max_attempts - 1
                if is_last_attempt or not config.should_retry(e):
                    raise StepError(step_name, e, attempt + 1) from e
                await asyncio.sleep(config.get_delay(attempt))

        raise StepError(step_name, RuntimeError("max_attempts must be >= 1"), 0)

    return attempt_all


# Predefined retry configs for convenience
NO_RETRY = RetryConfig(max_attempts=1)
RETRY_3X = RetryConfig(max_attempts=3, delay_seconds=1.0)
RETRY_5X = RetryConfig(max_attempts=5, delay_seconds=0.5, backoff_factor=2.0)
