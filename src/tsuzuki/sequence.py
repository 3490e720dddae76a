"""Sequence: a lazy, append-only list of steps with a pull iterator.

Steps are read from the live list at the moment the cursor reaches them,
never snapshotted. A step may therefore call ``seq.then(...)`` on its own
sequence while it runs, and the appended step is executed next.

CRITICAL DESIGN DECISIONS:
  1. ``then`` mutates in place and returns the same object. Rebinding a
     variable to a new derived chain would let late appends go missing.
  2. The terminal check happens at the start of the *following* ``next``
     call, after the previous step's body has fully returned. Appends made
     by that step are always seen by the check.
  3. ``next`` never unwraps async handles. That is the Runner's job.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, NamedTuple, NoReturn

from tsuzuki._types import StepFunction
from tsuzuki.step import Step, as_step


class IterResult(NamedTuple):
    """One pull from an iterator: the produced value and whether it is finished."""

    value: Any
    done: bool


DONE = IterResult(None, True)


class Sequence(Iterator[Any]):
    """An ordered, append-only series of steps.

    Usage:
        seq = Sequence(lambda x: x * 2, lambda x: x + 3)
        seq.then(lambda x: x * 4)

        seq.next(8)    # IterResult(value=16, done=False)
        seq.next(16)   # IterResult(value=19, done=False)
        seq.next(19)   # IterResult(value=76, done=False)
        seq.next()     # IterResult(value=None, done=True)

    Also follows the generator protocol (``send``/``throw``/``close``), so
    it works in ``for`` loops and anywhere a generator is expected.
    """

    def __init__(self, *steps: Step | StepFunction) -> None:
        self._steps: list[Step] = [as_step(s) for s in steps]
        self._cursor = 0
        self._done = False
        self._last_value: Any = None
        self._last_step: Step | None = None

    # --- Building ---

    def then(self, step: Step | StepFunction) -> Sequence:
        """Append ``step`` to the tail. Returns self for chaining.

        Valid at any time, including from inside a running step. Steps
        appended after the sequence reported done are kept but never run.
        """

        self._steps.append(as_step(step))
        return self

    def __iadd__(self, step: Step | StepFunction) -> Sequence:
        return self.then(step)

    # --- Iterator contract ---

    def next(self, value: Any = None) -> IterResult:
        """Run the step under the cursor with ``value`` as its input.

        Returns:
            ``IterResult(result, False)`` where ``result`` is whatever the
            step returned (possibly an async handle), or ``DONE`` once the
            cursor has reached the tail.

        Raises:
            Exception: Whatever the step raised. The sequence is then done.
        """

        if self._done:
            return DONE
        if self._cursor >= len(self._steps):
            self._done = True
            return DONE

        current = self._steps[self._cursor]
        self._cursor += 1
        self._last_step = current
        try:
            result = current(value)
        except BaseException:
            self._done = True
            raise
        self._last_value = result
        return IterResult(result, False)

    def send(self, value: Any) -> Any:
        """Generator-style pull: return the step's result or raise StopIteration."""

        result = self.next(value)
        if result.done:
            raise StopIteration
        return result.value

    def throw(self, error: BaseException) -> NoReturn:
        """Finish the sequence and raise ``error`` at the caller."""

        self._done = True
        raise error

    def close(self) -> None:
        """Finish the sequence early. Remaining steps never run."""

        self._done = True

    def __next__(self) -> Any:
        return self.send(None)

    def __iter__(self) -> Sequence:
        return self

    # --- Introspection ---

    @property
    def steps(self) -> tuple[Step, ...]:
        """Snapshot of all steps, consumed and pending."""

        return tuple(self._steps)

    @property
    def pending(self) -> tuple[Step, ...]:
        """Steps not yet consumed, in execution order."""

        if self._done:
            return ()
        return tuple(self._steps[self._cursor :])

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def done(self) -> bool:
        return self._done

    @property
    def last_value(self) -> Any:
        """Most recent step result (unresolved if it was a handle)."""

        return self._last_value

    @property
    def last_step(self) -> Step | None:
        return self._last_step

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        names = [s.name for s in self._steps]
        names.insert(self._cursor, "^")
        state = "done" if self._done else "open"
        return f"Sequence[{state}]({' >> '.join(names)})"
