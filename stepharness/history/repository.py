"""History log abstraction for step execution records."""

from __future__ import annotations

from typing import Protocol

from ..contracts import StepExecutionRecord


class HistoryLog(Protocol):
    """Protocol for append-only execution history backends.

    Implementations must make :meth:`append` atomic, since several sequence
    runs may share one log.
    """

    async def append(self, record: StepExecutionRecord) -> None:
        """Add ``record`` to the end of the log."""

    async def all(self) -> list[StepExecutionRecord]:
        """Return every record, oldest first."""

    async def recent(self, n: int) -> list[StepExecutionRecord]:
        """Return the last ``n`` records, oldest first."""

    async def clear(self) -> None:
        """Remove all records."""
