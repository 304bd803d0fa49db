"""Core data contracts for the step execution engine."""

from __future__ import annotations

import traceback as _traceback
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    computed_field,
    field_serializer,
    field_validator,
    model_validator,
)

from .bag import ParameterBag, decode_bag, encode_bag
from .constants import DEFAULT_SUCCESS_MESSAGE


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StepOutcome(BaseModel):
    """Verdict and payload produced by one step invocation."""

    success: bool
    message: str = ""
    data: Dict[str, Any] = Field(default_factory=dict)
    screenshots: List[str] = Field(default_factory=list)
    artifacts: List[str] = Field(default_factory=list)
    abort_on_failure: bool = True

    model_config = ConfigDict(frozen=True)

    @field_validator("data", mode="before")
    @classmethod
    def _decode_data(cls, v: Any, info: ValidationInfo) -> Any:
        # Tagged values only appear in serialized input; Python-side data is
        # taken as-is so user mappings that look tagged are left alone.
        if info.mode == "json" and isinstance(v, dict):
            return decode_bag(v)
        return v

    @field_serializer("data", when_used="json")
    def _encode_data(self, v: Dict[str, Any]) -> Dict[str, Any]:
        return encode_bag(v, strict=False)

    @classmethod
    def ok(
        cls,
        message: str = DEFAULT_SUCCESS_MESSAGE,
        data: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> "StepOutcome":
        """Build a successful outcome."""
        return cls(success=True, message=message, data=data or {}, **kwargs)

    @classmethod
    def failed(
        cls,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        abort_on_failure: bool = True,
        **kwargs: Any,
    ) -> "StepOutcome":
        """Build a failed outcome. Aborts the sequence unless told otherwise."""
        return cls(
            success=False,
            message=message,
            data=data or {},
            abort_on_failure=abort_on_failure,
            **kwargs,
        )

    @property
    def aborts_sequence(self) -> bool:
        """``True`` when this outcome should stop the running sequence."""
        return not self.success and self.abort_on_failure


StepAction = Callable[[ParameterBag], Union[Awaitable[StepOutcome], StepOutcome]]


class Step(BaseModel):
    """A named, registered unit of test action logic."""

    id: str
    name: str
    action: StepAction = Field(exclude=True, repr=False)
    description: str = ""
    tags: Tuple[str, ...] = ()
    metadata: Dict[str, Any] = Field(default_factory=dict)
    registered_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("id")
    @classmethod
    def _ensure_id(cls, v: str) -> str:
        if not v:
            raise ValueError("step id must be a non-empty string")
        return v


class StepError(BaseModel):
    """Serializable description of an exception raised by a step action."""

    type: str
    message: str
    traceback: Optional[str] = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "StepError":
        return cls(
            type=type(exc).__name__,
            message=str(exc),
            traceback="".join(
                _traceback.format_exception(type(exc), exc, exc.__traceback__)
            ),
        )


class StepExecutionRecord(BaseModel):
    """One immutable entry of the execution history.

    ``parameters`` is a snapshot of the bag taken when the step started.
    ``exception`` keeps the original exception object for in-process callers
    and is left out of serialized output; ``error`` carries the same
    information in a serializable form.
    """

    step_id: str
    step_name: str
    parameters: Dict[str, Any] = Field(default_factory=dict)
    start_time: datetime
    end_time: datetime
    success: bool
    outcome: StepOutcome
    error: Optional[StepError] = None
    exception: Optional[BaseException] = Field(default=None, exclude=True, repr=False)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("parameters", mode="before")
    @classmethod
    def _decode_parameters(cls, v: Any, info: ValidationInfo) -> Any:
        if info.mode == "json" and isinstance(v, dict):
            return decode_bag(v)
        return v

    @field_serializer("parameters", when_used="json")
    def _encode_parameters(self, v: Dict[str, Any]) -> Dict[str, Any]:
        return encode_bag(v, strict=False)

    @model_validator(mode="after")
    def _check_times(self) -> "StepExecutionRecord":
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be earlier than start_time")
        return self

    @computed_field  # type: ignore[misc]
    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def duration_ms(self) -> float:
        return self.duration.total_seconds() * 1000

    def to_json(self) -> str:
        """Serialize record to JSON."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str) -> "StepExecutionRecord":
        """Deserialize record from JSON."""
        return cls.model_validate_json(data)


class SequenceResult(BaseModel):
    """Ordered outcomes of one sequence run.

    Holds fewer outcomes than ``requested`` step ids when the run stopped
    early. Behaves like a read-only list of :class:`StepOutcome`.
    """

    requested: List[str] = Field(default_factory=list)
    outcomes: List[StepOutcome] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.outcomes)

    def __iter__(self) -> Iterator[StepOutcome]:  # type: ignore[override]
        return iter(self.outcomes)

    def __getitem__(self, index: int) -> StepOutcome:
        return self.outcomes[index]

    @property
    def aborted(self) -> bool:
        """``True`` when the run stopped before every requested step ran."""
        return len(self.outcomes) < len(self.requested)

    @property
    def success(self) -> bool:
        return not self.aborted and all(o.success for o in self.outcomes)

    @property
    def failures(self) -> List[StepOutcome]:
        return [o for o in self.outcomes if not o.success]

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str) -> "SequenceResult":
        return cls.model_validate_json(data)
