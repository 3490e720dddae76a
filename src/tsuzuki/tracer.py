"""Tracer protocol and built-in tracers.

Tracers are opt-in. A runner with no tracer attached runs silently.
Custom tracers implement the Tracer protocol, no base class required.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Protocol, runtime_checkable

from tsuzuki.context import RunContext


@runtime_checkable
class Tracer(Protocol):
    """Protocol for runner tracers.

    Using Protocol (not ABC) so any object with matching methods works.
    """

    async def on_run_start(self, ctx: RunContext) -> None: ...
    async def on_run_end(self, ctx: RunContext) -> None: ...
    async def on_step_start(self, ctx: RunContext, step_name: str, input_data: Any) -> None: ...
    async def on_suspend(self, ctx: RunContext, step_name: str) -> None: ...
    async def on_step_end(self, ctx: RunContext, step_name: str, result: Any) -> None: ...
    async def on_step_error(self, ctx: RunContext, step_name: str, error: BaseException) -> None: ...


class NullTracer:
    """Default tracer that does nothing. Zero overhead."""

    async def on_run_start(self, ctx: RunContext) -> None:
        pass

    async def on_run_end(self, ctx: RunContext) -> None:
        pass

    async def on_step_start(self, ctx: RunContext, step_name: str, input_data: Any) -> None:
        pass

    async def on_suspend(self, ctx: RunContext, step_name: str) -> None:
        pass

    async def on_step_end(self, ctx: RunContext, step_name: str, result: Any) -> None:
        pass

    async def on_step_error(self, ctx: RunContext, step_name: str, error: BaseException) -> None:
        pass


class StdoutTracer:
    """Simple tracer that prints to stderr. Useful for development.

    Usage:
        runner = Runner("my-run")
        runner.use(StdoutTracer())
    """

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    async def on_run_start(self, ctx: RunContext) -> None:
        print(f"▶ Run '{ctx.runner_name}' started [run={ctx.run_id}]", file=sys.stderr)

    async def on_run_end(self, ctx: RunContext) -> None:
        summary = ctx.summary()
        status = "✗" if ctx.error is not None else "✓"
        print(
            f"{status} Run '{ctx.runner_name}' finished "
            f"[{summary['total_duration_ms']}ms, {len(ctx.records)} steps]",
            file=sys.stderr,
        )

    async def on_step_start(self, ctx: RunContext, step_name: str, input_data: Any) -> None:
        print(f"  → {step_name}", file=sys.stderr, end="")
        if self.verbose:
            print(f" (input: {_truncate(input_data)})", file=sys.stderr, end="")
        print(file=sys.stderr)

    async def on_suspend(self, ctx: RunContext, step_name: str) -> None:
        if self.verbose:
            print(f"  … {step_name} waiting", file=sys.stderr)

    async def on_step_end(self, ctx: RunContext, step_name: str, result: Any) -> None:
        record = ctx.records[-1] if ctx.records else None
        ms = f" [{record.duration_ms:.1f}ms]" if record and record.duration_ms else ""
        print(f"  ✓ {step_name}{ms}", file=sys.stderr)

    async def on_step_error(self, ctx: RunContext, step_name: str, error: BaseException) -> None:
        print(f"  ✗ {step_name} FAILED: {error}", file=sys.stderr)


class LoggingTracer:
    """Tracer that emits standard library log records.

    The library never configures handlers; attach your own to the logger.
    Every record carries ``run_id`` and ``step`` in ``extra``.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        *,
        level: int = logging.DEBUG,
    ) -> None:
        self.logger = logger or logging.getLogger("tsuzuki.runner")
        self.level = level

    async def on_run_start(self, ctx: RunContext) -> None:
        self.logger.log(
            self.level,
            "run %s started",
            ctx.runner_name,
            extra={"run_id": ctx.run_id, "step": None},
        )

    async def on_run_end(self, ctx: RunContext) -> None:
        self.logger.log(
            self.level,
            "run %s finished: %s (%d steps)",
            ctx.runner_name,
            ctx.state.value,
            len(ctx.records),
            extra={"run_id": ctx.run_id, "step": None},
        )

    async def on_step_start(self, ctx: RunContext, step_name: str, input_data: Any) -> None:
        self.logger.log(
            self.level,
            "step %s started (input: %s)",
            step_name,
            _truncate(input_data),
            extra={"run_id": ctx.run_id, "step": step_name},
        )

    async def on_suspend(self, ctx: RunContext, step_name: str) -> None:
        self.logger.log(
            self.level,
            "step %s suspended on async result",
            step_name,
            extra={"run_id": ctx.run_id, "step": step_name},
        )

    async def on_step_end(self, ctx: RunContext, step_name: str, result: Any) -> None:
        self.logger.log(
            self.level,
            "step %s finished",
            step_name,
            extra={"run_id": ctx.run_id, "step": step_name},
        )

    async def on_step_error(self, ctx: RunContext, step_name: str, error: BaseException) -> None:
        self.logger.error(
            "step %s failed: %s",
            step_name,
            error,
            extra={"run_id": ctx.run_id, "step": step_name},
        )


def _truncate(obj: Any, max_len: int = 80) -> str:
    s = repr(obj)
    return s[:max_len] + "..." if len(s) > max_len else s
