"""The @step decorator, the unit of work of a Sequence.

A step is any callable from one input value to either a plain value or an
async handle. ``Step`` only adds a name (for tracing) and optional retry.

CRITICAL DESIGN DECISION:
  Calling a Step calls the function unchanged. A sync function returns its
  value, an ``async def`` returns a coroutine. The Step never awaits
  anything itself: unwrapping handles is the Runner's job.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, overload

from tsuzuki._types import StepFunction
from tsuzuki.retry import NO_RETRY, RetryConfig, retrying


class Step:
    """A named step function.

    Attributes:
        fn: The callable actually invoked (the retrying wrapper, if any).
        name: Step name (defaults to function name).
        retry: Retry configuration.
    """

    def __init__(
        self,
        fn: StepFunction,
        *,
        name: str | None = None,
        retry: RetryConfig = NO_RETRY,
    ) -> None:
        if not callable(fn):
            raise TypeError(f"A step must be callable, got {type(fn).__name__}")
        self.name = name or getattr(fn, "__name__", type(fn).__name__)
        self.retry = retry
        if retry.max_attempts > 1:
            fn = retrying(fn, retry, name=self.name)
        self.fn = fn
        functools.update_wrapper(self, fn, updated=())

    def __call__(self, value: Any = None) -> Any:
        return self.fn(value)

    def __repr__(self) -> str:
        return f"Step({self.name})"


def as_step(obj: Step | StepFunction) -> Step:
    """Return ``obj`` unchanged if it already is a Step, else wrap it."""
    if isinstance(obj, Step):
        return obj
    return Step(obj)


# --- Decorator ---


@overload
def step(fn: StepFunction) -> Step: ...


@overload
def step(
    *,
    name: str | None = None,
    retry: RetryConfig = NO_RETRY,
) -> Callable[[StepFunction], Step]: ...


def step(
    fn: StepFunction | None = None,
    *,
    name: str | None = None,
    retry: RetryConfig = NO_RETRY,
) -> Step | Callable[[StepFunction], Step]:
    """Decorator to create a step from a sync or async function.

    Can be used with or without arguments:

        @step
        def double(x: int) -> int: ...

        @step(retry=RETRY_3X)
        async def fetch(url: str) -> bytes: ...

    The decorated function remains directly callable:
        double(4)  # 8, no framework overhead
    """
    if fn is not None:
        return Step(fn, name=name, retry=retry)

    def decorator(f: StepFunction) -> Step:
        return Step(f, name=name, retry=retry)

    return decorator
