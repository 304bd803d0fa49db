"""Exception types raised inside stepharness.

Errors raised while a step runs never escape :meth:`StepExecutor.execute`;
the executor converts them into failure outcomes and keeps the original
object on the history record.
"""

from __future__ import annotations

from typing import Optional


class StepHarnessError(Exception):
    """Base class for stepharness errors."""


class StepCancelled(StepHarnessError):
    """Raised into a step when its cancellation token fires."""

    def __init__(self, message: str, reason: Optional[str] = None) -> None:
        super().__init__(message)
        self.reason = reason


class StepTimeout(StepHarnessError):
    """Raised when a step runs longer than the executor allows."""

    def __init__(self, message: str, timeout: float) -> None:
        super().__init__(message)
        self.timeout = timeout


class InvalidStepOutcome(StepHarnessError, TypeError):
    """Raised when a step action returns something other than a StepOutcome."""


class UnsupportedValueError(StepHarnessError, TypeError):
    """Raised when a parameter value cannot be serialized."""


class RegistryLoadError(StepHarnessError):
    """Raised when a ``module:attribute`` target does not name a registry."""
