"""Callback-style functions joined with a gate inside a sequence."""

from __future__ import annotations

import asyncio
import threading
from typing import Any

from tsuzuki import Sequence, gate, run, wrap


def legacy_fetch(url: str, callback: Any) -> None:
    """Pretend network call that answers from a worker thread."""

    threading.Timer(0.1, callback, args=(None, f"<body of {url}>")).start()


fetch = wrap(legacy_fetch)


async def main() -> None:
    seq = Sequence(
        lambda urls: gate(*(fetch(u) for u in urls)),
        lambda bodies: [len(b) for b in bodies],
    )
    sizes = await run(seq, input=["https://a.example", "https://b.example"])
    print("Sizes:", sizes)


if __name__ == "__main__":
    asyncio.run(main())
