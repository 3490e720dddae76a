"""Shared fixtures for Tsuzuki tests."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from tsuzuki import Sequence, step


@step
def double(x: int) -> int:
    return x * 2


@step
def add_three(x: int) -> int:
    return x + 3


@step
def quadruple(x: int) -> int:
    return x * 4


@step
async def async_add_one(x: int) -> int:
    await asyncio.sleep(0)
    return x + 1


@step
def always_fail(x: int) -> int:
    raise ValueError("intentional failure")


class RecordingTracer:
    def __init__(self) -> None:
        self.started = False
        self.ended = False
        self.step_starts: list[str] = []
        self.step_ends: list[tuple[str, Any]] = []
        self.suspends: list[str] = []
        self.errors: list[BaseException] = []

    async def on_run_start(self, ctx) -> None:  # type: ignore[no-untyped-def]
        self.started = True

    async def on_run_end(self, ctx) -> None:  # type: ignore[no-untyped-def]
        self.ended = True

    async def on_step_start(self, ctx, step_name, input_data):  # type: ignore[no-untyped-def]
        self.step_starts.append(step_name)

    async def on_suspend(self, ctx, step_name):  # type: ignore[no-untyped-def]
        self.suspends.append(step_name)

    async def on_step_end(self, ctx, step_name, result):  # type: ignore[no-untyped-def]
        self.step_ends.append((step_name, result))

    async def on_step_error(self, ctx, step_name, error):  # type: ignore[no-untyped-def]
        self.errors.append(error)


@pytest.fixture
def arithmetic() -> Sequence:
    """The double / add three / quadruple sequence used across tests."""

    return Sequence(double, add_three, quadruple)


@pytest.fixture
def tracer() -> RecordingTracer:
    return RecordingTracer()
