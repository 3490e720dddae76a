"""A sequence that keeps appending steps until its data says stop."""

from __future__ import annotations

import asyncio
import random

from tsuzuki import Runner, Sequence, StdoutTracer, step

seq = Sequence()


@step
async def roll(total: int) -> int:
    await asyncio.sleep(0.05)
    total += random.randint(1, 6)
    if total < 20:
        seq.then(roll)
    return total


async def main() -> None:
    seq.then(roll)
    runner = Runner("dice").use(StdoutTracer(verbose=True))
    total = await runner.run(seq, input=0)
    print(f"Reached {total} in {len(seq)} rolls")


if __name__ == "__main__":
    asyncio.run(main())
