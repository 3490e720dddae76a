"""Custom tracer that writes JSON lines to a file."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from tsuzuki import Runner, Sequence, step


class JSONLTracer:
    """Tracer implementation that appends events to a JSONL file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _append(self, line: str) -> None:
        with self.path.open("a", encoding="utf-8") as f:
            f.write(line)

    async def _write(self, record: dict[str, Any]) -> None:
        await asyncio.to_thread(self._append, json.dumps(record, default=repr) + "\n")

    async def on_run_start(self, ctx) -> None:  # type: ignore[no-untyped-def]
        await self._write({"event": "run_start", "run_id": ctx.run_id})

    async def on_run_end(self, ctx) -> None:  # type: ignore[no-untyped-def]
        await self._write({"event": "run_end", "summary": ctx.summary()})

    async def on_step_start(self, ctx, step_name, input_data):  # type: ignore[no-untyped-def]
        await self._write({"event": "step_start", "step": step_name, "input": input_data})

    async def on_suspend(self, ctx, step_name):  # type: ignore[no-untyped-def]
        await self._write({"event": "suspend", "step": step_name})

    async def on_step_end(self, ctx, step_name, result):  # type: ignore[no-untyped-def]
        await self._write({"event": "step_end", "step": step_name, "result": result})

    async def on_step_error(self, ctx, step_name, error):  # type: ignore[no-untyped-def]
        await self._write({"event": "step_error", "step": step_name, "error": str(error)})


@step
async def greet(name: str) -> str:
    return f"Hello, {name}!"


async def main() -> None:
    tracer = JSONLTracer("./trace.jsonl")
    runner = Runner("custom").use(tracer)
    await runner.run(Sequence(greet, str.upper), input="Tsuzuki")


if __name__ == "__main__":
    asyncio.run(main())
