"""Async-handle detection.

A value is an async handle when it exposes the awaitable contract, whatever
its concrete origin: coroutines, asyncio futures and tasks, any object with
``__await__``. Thread-pool futures are accepted too and bridged onto the
running loop.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
from collections.abc import Awaitable
from typing import Any


def is_async_handle(value: Any) -> bool:
    """Return True if ``value`` settles later rather than being a plain value."""

    return inspect.isawaitable(value) or isinstance(value, concurrent.futures.Future)


def to_future(handle: Any) -> asyncio.Future[Any]:
    """Schedule ``handle`` on the running loop and return a future for it.

    Coroutines become tasks, so they start running immediately.
    Must be called with a running event loop.
    """

    if isinstance(handle, concurrent.futures.Future):
        return asyncio.wrap_future(handle)
    return asyncio.ensure_future(handle)


async def settle(value: Any) -> Any:
    """Await ``value`` if it is an async handle, otherwise return it as is."""

    if isinstance(value, concurrent.futures.Future):
        return await asyncio.wrap_future(value)
    if inspect.isawaitable(value):
        awaitable: Awaitable[Any] = value
        return await awaitable
    return value
