from __future__ import annotations

import asyncio

import pytest

from tsuzuki import NO_RETRY, RetryConfig, Sequence, StepError, retrying, run


def test_no_retry_default() -> None:
    assert NO_RETRY.max_attempts == 1


def test_retry_config_delay_calculation() -> None:
    cfg = RetryConfig(delay_seconds=1, backoff_factor=2, jitter=False)
    assert cfg.get_delay(0) == 1
    assert cfg.get_delay(1) == 2
    assert cfg.get_delay(2) == 4


def test_retry_max_delay_cap() -> None:
    cfg = RetryConfig(delay_seconds=5, backoff_factor=3, max_delay_seconds=2, jitter=False)
    assert cfg.get_delay(3) == 2


def test_retry_on_filter() -> None:
    cfg = RetryConfig(retry_on=lambda e: isinstance(e, ValueError))
    assert cfg.should_retry(ValueError()) is True
    assert cfg.should_retry(TypeError()) is False


@pytest.mark.asyncio
async def test_retrying_reinvokes_async_operation() -> None:
    calls: list[int] = []

    async def fetch(x: int) -> int:
        calls.append(x)
        await asyncio.sleep(0)
        if len(calls) < 3:
            raise ConnectionError(f"attempt {len(calls)}")
        return x + 100

    fetch_with_retry = retrying(fetch, RetryConfig(max_attempts=3, delay_seconds=0.01))
    assert await fetch_with_retry(1) == 101
    assert calls == [1, 1, 1]


@pytest.mark.asyncio
async def test_retrying_exhausted_raises_step_error() -> None:
    def broken(x: int) -> int:
        raise ValueError("nope")

    with pytest.raises(StepError) as exc:
        await retrying(broken, RetryConfig(max_attempts=2, delay_seconds=0))(1)

    err = exc.value
    assert err.step_name == "broken"
    assert err.attempts == 2
    assert isinstance(err.original, ValueError)


@pytest.mark.asyncio
async def test_retrying_respects_filter() -> None:
    calls: list[int] = []

    def strict(x: int) -> int:
        calls.append(x)
        raise TypeError("not retryable")

    cfg = RetryConfig(max_attempts=5, delay_seconds=0, retry_on=lambda e: isinstance(e, ValueError))
    with pytest.raises(StepError) as exc:
        await retrying(strict, cfg, name="strict-step")(1)

    assert exc.value.attempts == 1
    assert exc.value.step_name == "strict-step"
    assert calls == [1]


@pytest.mark.asyncio
async def test_runner_never_retries_on_its_own() -> None:
    calls: list[int] = []

    def once(x: int) -> int:
        calls.append(x)
        raise ValueError("once")

    with pytest.raises(ValueError):
        await run(Sequence(once), input=1)
    assert calls == [1]
