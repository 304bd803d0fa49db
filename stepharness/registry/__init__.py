"""Step registry.

There is no module-level registry: create a :class:`StepRegistry` and hand
it to the executor, so tests can work with independent registries.
"""

from __future__ import annotations

from ..contracts import Step, StepAction
from .steps import StepRegistry

__all__ = [
    "Step",
    "StepAction",
    "StepRegistry",
]
