"""In-process registry of named test steps."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Iterable, Optional

from ..contracts import Step, StepAction

logger = logging.getLogger(__name__)


class StepRegistry:
    """Holds step definitions keyed by id.

    Registering an id that already exists replaces the previous step (last
    write wins). Lookups and snapshots are serialized against registration
    with a lock, so a reader never sees a half-registered step.
    """

    def __init__(self) -> None:
        self._steps: Dict[str, Step] = {}
        self._lock = threading.RLock()

    def register(
        self,
        step_id: str,
        name: str,
        action: StepAction,
        *,
        description: str = "",
        tags: Iterable[str] = (),
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Step:
        """Store ``action`` under ``step_id`` and return the new step."""
        if not step_id:
            raise ValueError("step id must be a non-empty string")
        if not callable(action):
            raise TypeError(f"action for step '{step_id}' is not callable")

        step = Step(
            id=step_id,
            name=name,
            action=action,
            description=description,
            tags=tuple(tags),
            metadata=metadata or {},
        )
        with self._lock:
            replaced = step_id in self._steps
            self._steps[step_id] = step

        if replaced:
            logger.debug(f"Replaced step: {name} ({step_id})")
        else:
            logger.debug(f"Registered step: {name} ({step_id})")
        return step

    def step(
        self, step_id: str, name: Optional[str] = None, **kwargs: Any
    ) -> Callable[[StepAction], StepAction]:
        """Decorator form of :meth:`register`.

        The step name defaults to the function name::

            @registry.step("login")
            async def open_session(bag):
                ...
        """

        def decorator(action: StepAction) -> StepAction:
            self.register(
                step_id, name or getattr(action, "__name__", step_id), action, **kwargs
            )
            return action

        return decorator

    def get(self, step_id: str) -> Optional[Step]:
        """Return the step registered under ``step_id`` or ``None``."""
        with self._lock:
            return self._steps.get(step_id)

    def list(self) -> Dict[str, Step]:
        """Return a snapshot of all registered steps."""
        with self._lock:
            return dict(self._steps)

    def by_tag(self, tag: str) -> Dict[str, Step]:
        """Return registered steps carrying ``tag``."""
        with self._lock:
            return {k: s for k, s in self._steps.items() if tag in s.tags}

    def __contains__(self, step_id: object) -> bool:
        with self._lock:
            return step_id in self._steps

    def __len__(self) -> int:
        with self._lock:
            return len(self._steps)
