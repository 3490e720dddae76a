"""Library-specific exceptions. Minimal set. Step exceptions pass through unmodified."""


class TsuzukiError(Exception):
    """Base exception for all Tsuzuki errors."""

    pass


class CallbackError(TsuzukiError):
    """Rejection raised when a wrapped callback reports a non-exception error.

    Attributes:
        reason: The error value exactly as passed to the callback.
    """

    def __init__(self, reason: object) -> None:
        self.reason = reason
        super().__init__(f"Callback reported an error: {reason!r}")


class StepError(TsuzukiError):
    """Raised by a retrying step when all attempts are exhausted.

    Attributes:
        step_name: Name of the failed step.
        original: The exception from the last attempt.
        attempts: Number of attempts made.
    """

    def __init__(self, step_name: str, original: BaseException, attempts: int) -> None:
        self.step_name = step_name
        self.original = original
        self.attempts = attempts
        super().__init__(
            f"Step '{step_name}' failed after {attempts} attempt(s): {original}"
        )


class RunnerBusyError(TsuzukiError):
    """Raised when a Runner is asked to start a second run while one is in progress."""

    def __init__(self, runner_name: str) -> None:
        self.runner_name = runner_name
        super().__init__(f"Runner '{runner_name}' is already running")
