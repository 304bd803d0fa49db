"""Sequential runner for ordered lists of steps."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .bag import ParameterBag, merge_into
from .cancellation import CancellationToken
from .contracts import SequenceResult, StepOutcome
from .execute import StepExecutor

logger = logging.getLogger(__name__)


class SequenceRunner:
    """Run step ids one after another against a shared parameter bag.

    Steps never overlap: step N+1 starts only after step N's outcome data
    has been merged into the bag. The run stops at the first outcome that
    failed with ``abort_on_failure`` set.
    """

    def __init__(self, executor: StepExecutor) -> None:
        self._executor = executor

    @property
    def executor(self) -> StepExecutor:
        return self._executor

    async def run_sequence(
        self,
        step_ids: Sequence[str],
        bag: Optional[ParameterBag] = None,
        *,
        token: Optional[CancellationToken] = None,
    ) -> SequenceResult:
        """Execute ``step_ids`` in order and return their outcomes.

        Args:
            step_ids: Step ids to run; duplicates run again.
            bag: Parameter bag shared by every step. Updated in place with
                each outcome's ``data``.
            token: Optional cancellation token passed to every step.

        Returns:
            The outcomes of the steps that ran, which is fewer than requested
            when a step aborted the sequence.
        """
        if bag is None:
            bag = {}
        requested = list(step_ids)
        outcomes: list[StepOutcome] = []

        for step_id in requested:
            outcome = await self._executor.execute(step_id, bag, token=token)
            outcomes.append(outcome)
            merge_into(bag, outcome.data)

            if outcome.aborts_sequence:
                logger.warning(
                    f"Stopping sequence due to failure in step: {step_id} "
                    f"({len(outcomes)}/{len(requested)} steps run)"
                )
                break

        return SequenceResult(requested=requested, outcomes=outcomes)
