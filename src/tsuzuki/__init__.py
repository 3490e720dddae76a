"""Tsuzuki — lazy, self-extending step sequences for asyncio.

Steps run in order. Any step may append more.
"""

from tsuzuki.adapter import wrap
from tsuzuki.context import RunContext, RunState, StepRecord
from tsuzuki.errors import CallbackError, RunnerBusyError, StepError, TsuzukiError
from tsuzuki.gate import gate
from tsuzuki.handles import is_async_handle
from tsuzuki.retry import NO_RETRY, RETRY_3X, RETRY_5X, RetryConfig, retrying
from tsuzuki.runner import Runner, run
from tsuzuki.sequence import DONE, IterResult, Sequence
from tsuzuki.step import Step, as_step, step
from tsuzuki.tracer import LoggingTracer, NullTracer, StdoutTracer, Tracer

__version__ = "0.1.0"

__all__ = [
    "step",
    "Step",
    "as_step",
    "Sequence",
    "IterResult",
    "DONE",
    "Runner",
    "run",
    "gate",
    "wrap",
    "is_async_handle",
    "RunContext",
    "RunState",
    "StepRecord",
    "Tracer",
    "NullTracer",
    "StdoutTracer",
    "LoggingTracer",
    "RetryConfig",
    "retrying",
    "NO_RETRY",
    "RETRY_3X",
    "RETRY_5X",
    "TsuzukiError",
    "StepError",
    "CallbackError",
    "RunnerBusyError",
]
