"""Execution context recorded for a single runner run."""

from __future__ import annotations

import enum
import time
import uuid
from dataclasses import dataclass, field
from typing import Any


class RunState(enum.Enum):
    """Lifecycle of a run: READY -> RUNNING (<-> SUSPENDED) -> DONE | ERRORED."""

    READY = "ready"
    RUNNING = "running"
    SUSPENDED = "suspended"
    DONE = "done"
    ERRORED = "errored"

    @property
    def finished(self) -> bool:
        return self in (RunState.DONE, RunState.ERRORED)


@dataclass
class StepRecord:
    """Timing information for a single step execution.

    ``suspended`` is True when the step produced an async handle that the
    runner had to wait on.
    """

    index: int
    step_name: str
    started_at: float
    ended_at: float | None = None
    duration_ms: float | None = None
    suspended: bool = False
    error: BaseException | None = None

    def finish(self, error: BaseException | None = None) -> None:
        self.ended_at = time.monotonic()
        self.duration_ms = (self.ended_at - self.started_at) * 1000
        self.error = error


@dataclass
class RunContext:
    """Execution context for a runner run.

    Attributes:
        run_id: Unique identifier for this run.
        runner_name: Name of the runner driving the target.
        metadata: User-defined metadata dict. Steps can read/write freely.
        state: Current lifecycle state.
        records: Ordered list of step records.
        result: Final value once the run is DONE.
        error: Terminal exception once the run is ERRORED.
    """

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    runner_name: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    state: RunState = RunState.READY
    records: list[StepRecord] = field(default_factory=list)
    result: Any = None
    error: BaseException | None = None

    def start_step(self, step_name: str) -> StepRecord:
        """Record the start of a step. Returns the StepRecord for later completion."""
        record = StepRecord(
            index=len(self.records), step_name=step_name, started_at=time.monotonic()
        )
        self.records.append(record)
        return record

    @property
    def total_duration_ms(self) -> float:
        """Total duration of all completed steps in milliseconds."""
        return sum(r.duration_ms for r in self.records if r.duration_ms is not None)

    @property
    def failed_steps(self) -> list[StepRecord]:
        """Steps that ended with an error."""
        return [r for r in self.records if r.error is not None]

    def summary(self) -> dict[str, Any]:
        """Return a summary dict suitable for logging."""
        return {
            "run_id": self.run_id,
            "runner": self.runner_name,
            "state": self.state.value,
            "total_duration_ms": round(self.total_duration_ms, 2),
            "steps": [
                {
                    "name": r.step_name,
                    "duration_ms": round(r.duration_ms, 2) if r.duration_ms else None,
                    "suspended": r.suspended,
                    "error": str(r.error) if r.error else None,
                }
                for r in self.records
            ],
        }
