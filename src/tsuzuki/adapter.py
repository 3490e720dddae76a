"""Adapter from callback-style functions to handle-returning step functions.

A callback-style function takes a trailing ``callback(err, result)`` and
calls it exactly once. ``wrap`` turns it into a function returning an
asyncio future, which a Sequence step can return directly.
"""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Callable
from typing import Any

from tsuzuki.errors import CallbackError


def wrap(fn: Callable[..., Any]) -> Callable[..., asyncio.Future[Any]]:
    """Convert ``fn(*args, callback)`` into ``fn(*args) -> Future``.

    A falsy ``err`` fulfils the future with ``result``. A truthy ``err``
    rejects it: exceptions as they are, anything else inside CallbackError.
    The callback may fire from another thread; settlement always happens on
    the loop that created the future. Calling the callback twice is not
    guarded against.

    Usage:
        read_config = wrap(legacy_read_config)

        @wrap
        def lookup(key, callback): ...
    """

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> asyncio.Future[Any]:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()

        def complete(err: Any, result: Any = None) -> None:
            loop.call_soon_threadsafe(_settle, future, err, result)

        fn(*args, complete, **kwargs)
        return future

    return wrapper


def _settle(future: asyncio.Future[Any], err: Any, result: Any) -> None:
    if future.cancelled():
        return
    if err:
        error = err if isinstance(err, BaseException) else CallbackError(err)
        future.set_exception(error)
    else:
        future.set_result(result)
