"""Minimal Tsuzuki sequence example."""

from __future__ import annotations

import asyncio

from tsuzuki import Sequence, run, step


@step
def double(x: int) -> int:
    return x * 2


@step
async def add_three(x: int) -> int:
    await asyncio.sleep(0.1)
    return x + 3


async def main() -> None:
    seq = Sequence(double, add_three)
    seq.then(lambda x: x * 4)
    result = await run(seq, input=8)
    print("Result:", result)


if __name__ == "__main__":
    asyncio.run(main())
