"""In-memory implementation of the history log."""

from __future__ import annotations

import asyncio
from typing import List

from ..contracts import StepExecutionRecord
from .repository import HistoryLog


class InMemoryHistoryLog(HistoryLog):
    """Keep execution records in a local list.

    Useful for tests or when no database is configured. Records are not
    persisted across process restarts and are never evicted; call
    :meth:`clear` to bound memory in long-running processes.
    """

    def __init__(self) -> None:
        self._records: List[StepExecutionRecord] = []
        self._lock = asyncio.Lock()

    async def append(self, record: StepExecutionRecord) -> None:
        async with self._lock:
            self._records.append(record)

    async def all(self) -> list[StepExecutionRecord]:
        async with self._lock:
            return list(self._records)

    async def recent(self, n: int) -> list[StepExecutionRecord]:
        if n <= 0:
            return []
        async with self._lock:
            return self._records[-n:]

    async def clear(self) -> None:
        async with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
