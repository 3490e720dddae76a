"""Runner — drives a sequence (or generator) to completion.

The runner repeatedly pulls from its target, feeding each resolved value
back in as the next input. Plain values are fed back immediately, without
giving up the event loop. Async handles suspend the run until they settle.

CRITICAL DESIGN DECISIONS:
  1. Step exceptions and rejections are NEVER rewrapped. The run raises the
     very exception the step raised or its handle rejected with.
  2. After a failure the target is never advanced again, whatever steps
     remain. Nothing is retried here.
  3. One run per Runner at a time, so steps under a runner never overlap.
     A run paused between steps by its consumer does not hold the runner:
     starting another run retires it.
  4. Tracing is opt-in. A runner with no tracer has no tracing overhead.
"""

from __future__ import annotations

import contextlib
import inspect
from collections.abc import AsyncGenerator, Generator
from typing import Any

from tsuzuki.context import RunContext, RunState
from tsuzuki.errors import RunnerBusyError
from tsuzuki.handles import is_async_handle, settle
from tsuzuki.sequence import IterResult
from tsuzuki.tracer import NullTracer, Tracer


class _Driver:
    """Uniform ``advance(value) -> IterResult`` over the supported targets."""

    def __init__(self, target: Any, args: tuple[Any, ...], input: Any) -> None:
        if inspect.isgeneratorfunction(target):
            target = target(*args)
        elif args:
            raise TypeError("Positional arguments are only passed to generator functions")

        if callable(getattr(target, "next", None)):
            self.is_generator = False
        elif isinstance(target, Generator):
            if input is not None:
                raise TypeError(
                    "Generators take their inputs as positional arguments, not 'input'"
                )
            self.is_generator = True
        else:
            raise TypeError(
                f"Expected a Sequence, an iterator with next(), or a generator, "
                f"got {type(target).__name__}"
            )

        self.target = target
        self.label = getattr(target, "__name__", type(target).__name__)

    def advance(self, value: Any) -> IterResult:
        if not self.is_generator:
            return self.target.next(value)
        try:
            return IterResult(self.target.send(value), False)
        except StopIteration as stop:
            return IterResult(stop.value, True)

    def upcoming(self, index: int) -> str | None:
        """Name of the step the next advance will run.

        None when the target can tell it has nothing left (a Sequence with no
        pending steps). Other targets can't be peeked at, so every advance
        counts as a step.
        """
        pending = getattr(self.target, "pending", None)
        if pending is not None:
            return pending[0].name if pending else None
        return f"{self.label}[{index}]"

    def step_name(self, index: int) -> str:
        last = getattr(self.target, "last_step", None)
        if last is not None:
            return last.name
        return f"{self.label}[{index}]"

    def final_value(self, result: IterResult, last: Any) -> Any:
        """Generators return their value. Sequences finish with None, so fall back."""
        if self.is_generator or result.value is not None:
            return result.value
        return last


class Runner:
    """Runs a Sequence, an iterator with ``next(input)``, or a generator.

    Usage:
        runner = Runner("checkout")
        runner.use(StdoutTracer())  # opt-in

        total = await runner.run(seq, input=order)

        # Or observe each resolved value as it is produced:
        async for value in runner.iterate(seq, input=order):
            ...
    """

    def __init__(self, name: str = "default") -> None:
        self.name = name
        self._tracer: Tracer = NullTracer()
        self._last_context: RunContext | None = None
        self._active = False

    @property
    def last_context(self) -> RunContext | None:
        """Most recent run context, if any."""

        return self._last_context

    @property
    def state(self) -> RunState:
        if self._last_context is None:
            return RunState.READY
        return self._last_context.state

    def use(self, tracer: Tracer) -> Runner:
        """Attach a tracer. Returns self for chaining.

        Args:
            tracer: Any object implementing the Tracer protocol.
        """

        self._tracer = tracer
        return self

    async def run(
        self,
        target: Any,
        *args: Any,
        input: Any = None,
        metadata: dict[str, Any] | None = None,
    ) -> Any:
        """Drive ``target`` until it is done.

        Args:
            target: A Sequence, any object with ``next(input) -> IterResult``,
                a generator, or a generator function.
            *args: Arguments for a generator function target.
            input: Input for the first step (not used for generators).
            metadata: Optional metadata dict attached to the RunContext.

        Returns:
            A generator's return value. For other targets, the terminal
            value if not None, else the last resolved step value.

        Raises:
            RunnerBusyError: If this runner is already running.
            Exception: Whatever a step raised or its handle rejected with.
        """

        ctx = RunContext(runner_name=self.name, metadata=metadata or {})
        async with contextlib.aclosing(self._drive(ctx, target, args, input)) as values:
            async for _ in values:
                pass
        return ctx.result

    def iterate(
        self,
        target: Any,
        *args: Any,
        input: Any = None,
        metadata: dict[str, Any] | None = None,
    ) -> AsyncGenerator[Any, None]:
        """Drive ``target``, yielding every resolved step value in order.

        Same semantics as ``run``. Between values the run is SUSPENDED and
        does not hold the runner. Leaving the loop early, or starting
        another run on this runner, ends it in state DONE without advancing
        the target again.
        """

        ctx = RunContext(runner_name=self.name, metadata=metadata or {})
        return self._drive(ctx, target, args, input)

    async def _drive(
        self,
        ctx: RunContext,
        target: Any,
        args: tuple[Any, ...],
        input: Any,
    ) -> AsyncGenerator[Any, None]:
        if self._active:
            raise RunnerBusyError(self.name)
        driver = _Driver(target, args, input)

        abandoned = self._last_context
        if abandoned is not None and not abandoned.state.finished:
            await self._finish(abandoned, RunState.DONE)

        self._last_context = ctx
        self._active = True
        ctx.state = RunState.RUNNING
        current = input

        try:
            await self._tracer.on_run_start(ctx)

            while True:
                index = len(ctx.records)
                name = driver.upcoming(index)
                record = None
                if name is not None:
                    record = ctx.start_step(name)
                    await self._tracer.on_step_start(ctx, name, current)

                try:
                    result = driver.advance(current)
                except Exception as e:
                    if record is None:
                        record = ctx.start_step(driver.step_name(index))
                    record.finish(error=e)
                    await self._tracer.on_step_error(ctx, record.step_name, e)
                    raise

                if result.done:
                    ctx.result = driver.final_value(result, current)
                    if record is not None:
                        record.finish()
                        await self._tracer.on_step_end(ctx, record.step_name, ctx.result)
                    break

                if record is None:
                    # appended while the start hook was awaited
                    record = ctx.start_step(driver.step_name(index))
                    await self._tracer.on_step_start(ctx, record.step_name, current)

                value = result.value
                if is_async_handle(value):
                    record.suspended = True
                    ctx.state = RunState.SUSPENDED
                    await self._tracer.on_suspend(ctx, record.step_name)
                    try:
                        value = await settle(value)
                    except BaseException as e:
                        record.finish(error=e)
                        if isinstance(e, Exception):
                            await self._tracer.on_step_error(ctx, record.step_name, e)
                        raise
                    ctx.state = RunState.RUNNING

                record.finish()
                await self._tracer.on_step_end(ctx, record.step_name, value)

                current = value
                ctx.result = value

                ctx.state = RunState.SUSPENDED
                self._active = False
                yield value
                if self._last_context is not ctx:
                    # another run took over the runner while we were paused
                    return
                self._active = True
                ctx.state = RunState.RUNNING

        except GeneratorExit:
            await self._finish(ctx, RunState.DONE)
            raise
        except BaseException as e:
            ctx.error = e
            await self._finish(ctx, RunState.ERRORED)
            raise
        else:
            await self._finish(ctx, RunState.DONE)
        finally:
            if self._last_context is ctx:
                self._active = False

    async def _finish(self, ctx: RunContext, state: RunState) -> None:
        if ctx.state.finished:
            return
        ctx.state = state
        await self._tracer.on_run_end(ctx)


async def run(target: Any, *args: Any, input: Any = None) -> Any:
    """Run ``target`` to completion with a fresh, untraced Runner."""

    return await Runner().run(target, *args, input=input)
