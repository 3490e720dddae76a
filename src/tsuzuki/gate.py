"""Gate: fan-in of several async results into one ordered list.

Members are observed concurrently. The gate fulfils once every member has
fulfilled, with results in argument order, or rejects with the first
rejection it observes. Siblings of a rejected member keep running; their
outcomes are retrieved and dropped.
"""

from __future__ import annotations

import asyncio
import functools
from typing import Any

from tsuzuki.handles import is_async_handle, to_future


def gate(*members: Any) -> asyncio.Future[list[Any]]:
    """Join ``members`` into a single future of their values.

    Plain values count as already fulfilled. Coroutines are scheduled as
    tasks right away. Must be called with a running event loop.

    Usage:
        results = await gate(fetch("a"), fetch("b"), 42)
    """

    loop = asyncio.get_running_loop()
    joined: asyncio.Future[list[Any]] = loop.create_future()
    results: list[Any] = [None] * len(members)
    remaining = len(members)

    def settle_member(index: int, member: asyncio.Future[Any]) -> None:
        nonlocal remaining

        if member.cancelled():
            if not joined.done():
                joined.cancel()
            return
        error = member.exception()
        if joined.done():
            return
        if error is not None:
            joined.set_exception(error)
            return
        results[index] = member.result()
        remaining -= 1
        if remaining == 0:
            joined.set_result(results)

    for index, member in enumerate(members):
        if is_async_handle(member):
            to_future(member).add_done_callback(functools.partial(settle_member, index))
        else:
            results[index] = member
            remaining -= 1

    if remaining == 0:
        joined.set_result(results)
    return joined
