"""stepharness: sequential execution of registered asynchronous test steps."""

from .bag import ParameterBag
from .cancellation import CancellationToken, current_token
from .comparison import ComparisonOptions, ComparisonResult, compare_numeric
from .contracts import SequenceResult, Step, StepError, StepExecutionRecord, StepOutcome
from .execute import StepExecutor
from .harness import StepHarness
from .history import HistoryLog, InMemoryHistoryLog, SQLiteHistoryLog, get_history
from .registry import StepRegistry
from .sequence import SequenceRunner

__version__ = "0.1.0"
__all__ = [
    "CancellationToken",
    "ComparisonOptions",
    "ComparisonResult",
    "HistoryLog",
    "InMemoryHistoryLog",
    "ParameterBag",
    "SQLiteHistoryLog",
    "SequenceResult",
    "SequenceRunner",
    "Step",
    "StepError",
    "StepExecutionRecord",
    "StepExecutor",
    "StepHarness",
    "StepOutcome",
    "StepRegistry",
    "compare_numeric",
    "current_token",
    "get_history",
]
