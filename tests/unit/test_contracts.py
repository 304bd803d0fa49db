"""Tests for outcome and record models."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from stepharness import SequenceResult, StepError, StepExecutionRecord, StepOutcome


def test_outcome_constructors() -> None:
    ok = StepOutcome.ok()
    assert ok.success is True
    assert ok.message == "Step completed successfully"
    assert ok.data == {}
    assert ok.abort_on_failure is True
    assert ok.aborts_sequence is False

    failed = StepOutcome.failed("bad", data={"k": "v"})
    assert failed.success is False
    assert failed.abort_on_failure is True
    assert failed.aborts_sequence is True

    soft = StepOutcome.failed("soft", abort_on_failure=False)
    assert soft.aborts_sequence is False


def test_outcome_is_immutable() -> None:
    outcome = StepOutcome.ok()
    with pytest.raises(ValidationError):
        outcome.success = False


def _record(**overrides) -> StepExecutionRecord:
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    fields = dict(
        step_id="s",
        step_name="S",
        start_time=start,
        end_time=start + timedelta(milliseconds=250),
        success=True,
        outcome=StepOutcome.ok(),
    )
    fields.update(overrides)
    return StepExecutionRecord(**fields)


def test_record_duration() -> None:
    record = _record()
    assert record.duration == timedelta(milliseconds=250)
    assert record.duration_ms == pytest.approx(250.0)


def test_record_rejects_end_before_start() -> None:
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    with pytest.raises(ValidationError):
        _record(start_time=start, end_time=start - timedelta(seconds=1))


def test_record_is_immutable() -> None:
    record = _record()
    with pytest.raises(ValidationError):
        record.success = False


def test_step_error_from_exception() -> None:
    try:
        raise ValueError("bad price")
    except ValueError as e:
        error = StepError.from_exception(e)

    assert error.type == "ValueError"
    assert error.message == "bad price"
    assert "ValueError: bad price" in error.traceback


def test_record_json_excludes_exception_object() -> None:
    exc = RuntimeError("boom")
    record = _record(
        success=False,
        outcome=StepOutcome.failed("boom"),
        error=StepError.from_exception(exc),
        exception=exc,
    )

    restored = StepExecutionRecord.from_json(record.to_json())

    assert "exception" not in record.model_dump()
    assert restored.exception is None
    assert restored.error == record.error
    assert restored.duration == record.duration


def test_sequence_result_behaves_like_a_list() -> None:
    outcomes = [StepOutcome.ok(), StepOutcome.failed("x")]
    result = SequenceResult(requested=["a", "b", "c"], outcomes=outcomes)

    assert len(result) == 2
    assert list(result) == outcomes
    assert result[1].message == "x"
    assert result.aborted is True
    assert result.success is False
