"""Step execution engine for stepharness."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from .bag import ParameterBag, snapshot_bag
from .cancellation import CancellationToken, _current_token
from .constants import (
    STEP_CANCELLED_MESSAGE,
    STEP_NOT_FOUND_MESSAGE,
    STEP_TIMEOUT_MESSAGE,
)
from .contracts import Step, StepError, StepExecutionRecord, StepOutcome
from .errors import InvalidStepOutcome, StepCancelled, StepTimeout
from .history import HistoryLog
from .registry import StepRegistry

logger = logging.getLogger(__name__)


class StepExecutor:
    """Runs single registered steps and records each run in the history log.

    :meth:`execute` never raises for step problems. A missing step, a failed
    outcome and an exception inside the action all come back as a
    :class:`StepOutcome`, and every call appends exactly one record.
    """

    def __init__(
        self,
        registry: StepRegistry,
        history: HistoryLog,
        *,
        step_timeout: Optional[float] = None,
    ) -> None:
        self._registry = registry
        self._history = history
        self._step_timeout = step_timeout

    @property
    def registry(self) -> StepRegistry:
        return self._registry

    @property
    def history(self) -> HistoryLog:
        return self._history

    async def execute(
        self,
        step_id: str,
        bag: ParameterBag,
        *,
        token: Optional[CancellationToken] = None,
    ) -> StepOutcome:
        """Run step ``step_id`` with ``bag`` and return its outcome.

        The bag is passed to the action as-is; merging outcome data back into
        it is left to the caller.
        """
        step = self._registry.get(step_id)
        started_wall = datetime.now(timezone.utc)
        started = time.perf_counter()
        parameters = snapshot_bag(bag)

        if step is None:
            logger.error(f"Step not found: {step_id}")
            outcome = StepOutcome.failed(STEP_NOT_FOUND_MESSAGE.format(step_id=step_id))
            await self._record(
                step_id, step_id, parameters, started_wall, started, outcome
            )
            return outcome

        logger.info(f"Executing step: {step.name}")
        error: Optional[BaseException] = None
        try:
            outcome = await self._invoke(step, bag, token)
        except asyncio.CancelledError as e:
            # The caller's task is being cancelled: record the step, then let
            # the cancellation continue.
            logger.warning(f"Step cancelled by caller: {step.name}")
            outcome = StepOutcome.failed(STEP_CANCELLED_MESSAGE.format(step_id=step.id))
            await self._record(
                step.id, step.name, parameters, started_wall, started, outcome, e
            )
            raise
        except Exception as e:
            error = e
            outcome = StepOutcome.failed(str(e) or type(e).__name__)
            logger.exception(f"Step failed: {step.name}")

        record = await self._record(
            step.id, step.name, parameters, started_wall, started, outcome, error
        )
        if error is None:
            logger.info(
                f"Step completed: {step.name} - "
                f"{'SUCCESS' if outcome.success else 'FAILED'} in {record.duration_ms:.1f}ms"
            )
        return outcome

    async def _record(
        self,
        step_id: str,
        step_name: str,
        parameters: ParameterBag,
        started_wall: datetime,
        started: float,
        outcome: StepOutcome,
        error: Optional[BaseException] = None,
    ) -> StepExecutionRecord:
        elapsed = max(time.perf_counter() - started, 0.0)
        record = StepExecutionRecord(
            step_id=step_id,
            step_name=step_name,
            parameters=parameters,
            start_time=started_wall,
            end_time=started_wall + timedelta(seconds=elapsed),
            success=outcome.success,
            outcome=outcome,
            error=StepError.from_exception(error) if error is not None else None,
            exception=error,
        )
        await self._history.append(record)
        return record

    async def _invoke(
        self, step: Step, bag: ParameterBag, token: Optional[CancellationToken]
    ) -> StepOutcome:
        if token is not None and token.cancelled:
            raise StepCancelled(
                STEP_CANCELLED_MESSAGE.format(step_id=step.id), token.reason
            )

        context_token = _current_token.set(token)
        try:
            task = asyncio.ensure_future(self._call(step, bag))
        finally:
            _current_token.reset(context_token)

        waiter = asyncio.ensure_future(token.wait()) if token is not None else None
        watched = {task} if waiter is None else {task, waiter}
        try:
            # Only the caller's own cancellation can surface from this wait;
            # whatever the action raises stays inside ``task``.
            await asyncio.wait(
                watched, timeout=self._step_timeout, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if waiter is not None:
                waiter.cancel()

        if task.done():
            try:
                return task.result()
            except asyncio.CancelledError as e:
                # Raised by the action itself, e.g. an inner future was cancelled
                raise StepCancelled(
                    STEP_CANCELLED_MESSAGE.format(step_id=step.id), str(e) or None
                ) from e

        task.cancel()
        await asyncio.wait({task})

        if token is not None and token.cancelled:
            raise StepCancelled(
                STEP_CANCELLED_MESSAGE.format(step_id=step.id), token.reason
            )
        raise StepTimeout(
            STEP_TIMEOUT_MESSAGE.format(step_id=step.id, timeout=self._step_timeout),
            self._step_timeout,
        )

    async def _call(self, step: Step, bag: ParameterBag) -> StepOutcome:
        result: Any = step.action(bag)
        if inspect.isawaitable(result):
            result = await result
        if not isinstance(result, StepOutcome):
            raise InvalidStepOutcome(
                f"step '{step.id}' returned {type(result).__name__}, expected StepOutcome"
            )
        return result
