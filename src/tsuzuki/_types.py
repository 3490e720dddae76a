"""Internal type aliases used across the library."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

# A step function signature: (input) -> value | awaitable
# Kept loose on purpose: sync and async callables are both valid steps.
StepFunction = Callable[[Any], Any]
