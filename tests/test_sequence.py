from __future__ import annotations

import pytest

from tsuzuki import DONE, IterResult, Sequence, Step


def test_sequence_pulls_in_order(arithmetic: Sequence) -> None:
    assert arithmetic.next(8) == IterResult(16, False)
    assert arithmetic.next(16) == IterResult(19, False)
    assert arithmetic.next(19) == IterResult(76, False)
    assert arithmetic.next() == IterResult(None, True)


def test_sequence_done_is_idempotent() -> None:
    calls: list[int] = []
    seq = Sequence(lambda x: calls.append(x) or x)

    seq.next(1)
    assert seq.next() is DONE
    assert seq.next(5) is DONE
    assert seq.next(6).done is True
    assert calls == [1]
    assert seq.done is True


def test_empty_sequence_is_done() -> None:
    seq = Sequence()
    assert seq.next("anything") == IterResult(None, True)
    assert seq.done is True
    assert len(seq) == 0


def test_step_appending_to_own_sequence_runs_next() -> None:
    seq = Sequence()

    def first(x: int) -> int:
        seq.then(lambda y: y + 100)
        return x + 1

    seq.then(first)

    assert seq.next(1) == IterResult(2, False)
    assert seq.next(2) == IterResult(102, False)
    assert seq.next() == IterResult(None, True)


def test_append_from_last_step_is_seen_before_done_check(arithmetic: Sequence) -> None:
    def extend(x: int) -> int:
        arithmetic.then(lambda y: -y)
        return x

    arithmetic.then(extend)
    for value in (8, 16, 19, 76):
        arithmetic.next(value)

    assert arithmetic.next(76) == IterResult(-76, False)
    assert arithmetic.next().done is True


def test_appends_run_after_pending_steps() -> None:
    order: list[str] = []
    seq = Sequence()

    def first(_: object) -> None:
        order.append("first")
        seq.then(lambda _: order.append("appended"))

    seq.then(first).then(lambda _: order.append("second"))

    while not seq.next().done:
        pass

    assert order == ["first", "second", "appended"]


def test_append_does_not_touch_consumed_steps(arithmetic: Sequence) -> None:
    arithmetic.next(1)
    consumed = arithmetic.steps[0]

    arithmetic.then(lambda x: x)

    assert arithmetic.steps[0] is consumed
    assert arithmetic.cursor == 1
    assert [s.name for s in arithmetic.pending] == ["add_three", "quadruple", "<lambda>"]


def test_append_after_done_never_runs() -> None:
    seq = Sequence(lambda x: x)
    seq.next(1)
    assert seq.next().done is True

    seq.then(lambda x: pytest.fail("must not run"))

    assert seq.next(2) is DONE
    assert len(seq) == 2
    assert seq.pending == ()


def test_then_returns_same_sequence() -> None:
    seq = Sequence()
    assert seq.then(lambda x: x) is seq

    seq += lambda x: x
    assert len(seq) == 2
    assert all(isinstance(s, Step) for s in seq.steps)


def test_next_does_not_unwrap_handles() -> None:
    async def later(x: int) -> int:
        return x

    seq = Sequence(later)
    result = seq.next(3)

    assert result.done is False
    assert hasattr(result.value, "__await__")
    result.value.close()


def test_step_failure_finishes_sequence() -> None:
    ran: list[str] = []

    def boom(_: object) -> None:
        raise KeyError("boom")

    seq = Sequence(boom, lambda _: ran.append("after"))

    with pytest.raises(KeyError):
        seq.next()

    assert seq.next() is DONE
    assert ran == []


def test_sequence_in_for_loop() -> None:
    seq = Sequence(lambda _: "a", lambda _: "b")
    assert list(seq) == ["a", "b"]
    assert list(seq) == []


def test_send_raises_stop_iteration_at_end() -> None:
    seq = Sequence(lambda x: x * 3)
    assert seq.send(2) == 6
    with pytest.raises(StopIteration):
        seq.send(6)


def test_close_skips_remaining_steps(arithmetic: Sequence) -> None:
    arithmetic.next(1)
    arithmetic.close()

    assert arithmetic.done is True
    assert arithmetic.next(2) is DONE


def test_throw_finishes_and_raises(arithmetic: Sequence) -> None:
    with pytest.raises(RuntimeError, match="stop"):
        arithmetic.throw(RuntimeError("stop"))
    assert arithmetic.next(1) is DONE


def test_last_step_and_value(arithmetic: Sequence) -> None:
    assert arithmetic.last_step is None
    arithmetic.next(8)
    assert arithmetic.last_step is not None
    assert arithmetic.last_step.name == "double"
    assert arithmetic.last_value == 16


def test_sequence_repr_marks_cursor(arithmetic: Sequence) -> None:
    arithmetic.next(1)
    assert repr(arithmetic) == "Sequence[open](double >> ^ >> add_three >> quadruple)"
