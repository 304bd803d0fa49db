"""Convenience facade bundling registry, executor, runner and history."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Sequence

from .bag import ParameterBag
from .cancellation import CancellationToken
from .config import HarnessConfig
from .contracts import SequenceResult, Step, StepAction, StepExecutionRecord, StepOutcome
from .execute import StepExecutor
from .history import HistoryLog, InMemoryHistoryLog, get_history
from .registry import StepRegistry
from .sequence import SequenceRunner


class StepHarness:
    """One registry, one history log and the engine wired around them.

    Each harness is independent; nothing is shared between instances unless
    the same registry or history object is passed to both.
    """

    def __init__(
        self,
        registry: Optional[StepRegistry] = None,
        history: Optional[HistoryLog] = None,
        *,
        step_timeout: Optional[float] = None,
    ) -> None:
        self.registry = registry if registry is not None else StepRegistry()
        self.history = history if history is not None else InMemoryHistoryLog()
        self.executor = StepExecutor(
            self.registry, self.history, step_timeout=step_timeout
        )
        self.runner = SequenceRunner(self.executor)

    @classmethod
    def from_config(
        cls, config: HarnessConfig, registry: Optional[StepRegistry] = None
    ) -> "StepHarness":
        """Build a harness whose history backend and timeout come from ``config``."""
        return cls(
            registry=registry,
            history=get_history(config.history.url, config=config),
            step_timeout=config.executor.step_timeout,
        )

    def register(self, step_id: str, name: str, action: StepAction, **kwargs: Any) -> Step:
        return self.registry.register(step_id, name, action, **kwargs)

    def step(
        self, step_id: str, name: Optional[str] = None, **kwargs: Any
    ) -> Callable[[StepAction], StepAction]:
        return self.registry.step(step_id, name, **kwargs)

    async def execute(
        self,
        step_id: str,
        bag: ParameterBag,
        *,
        token: Optional[CancellationToken] = None,
    ) -> StepOutcome:
        return await self.executor.execute(step_id, bag, token=token)

    async def run_sequence(
        self,
        step_ids: Sequence[str],
        bag: Optional[ParameterBag] = None,
        *,
        token: Optional[CancellationToken] = None,
    ) -> SequenceResult:
        return await self.runner.run_sequence(step_ids, bag, token=token)

    def registered_steps(self) -> Dict[str, Step]:
        return self.registry.list()

    async def execution_history(self) -> list[StepExecutionRecord]:
        return await self.history.all()

    async def clear_history(self) -> None:
        await self.history.clear()
