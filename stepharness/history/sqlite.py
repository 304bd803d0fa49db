"""SQLite implementation of the history log."""

from __future__ import annotations

import asyncio
import sqlite3
import threading
from pathlib import Path
from typing import Any

from ..contracts import StepExecutionRecord
from .repository import HistoryLog


class SQLiteHistoryLog(HistoryLog):
    """Persist execution records in a SQLite file.

    Each record is stored as its JSON document; the captured exception
    object itself is not persisted, only its serialized ``error`` form.
    """

    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._ensure_schema()

    # ------------------------------------------------------------------
    # Schema management
    def _ensure_schema(self) -> None:
        with self._lock:
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS step_history (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    step_id TEXT NOT NULL,
                    success INTEGER NOT NULL,
                    started_at TEXT NOT NULL,
                    record TEXT NOT NULL
                )
                """
            )
            self._conn.commit()

    # ------------------------------------------------------------------
    # Helper methods
    def _execute(self, query: str, *params: Any) -> None:
        with self._lock:
            self._conn.execute(query, params)
            self._conn.commit()

    def _fetchall(self, query: str, *params: Any) -> list[sqlite3.Row]:
        with self._lock:
            cur = self._conn.execute(query, params)
            return cur.fetchall()

    @staticmethod
    def _to_records(rows: list[sqlite3.Row]) -> list[StepExecutionRecord]:
        return [StepExecutionRecord.from_json(r["record"]) for r in rows]

    # ------------------------------------------------------------------
    # History API
    async def append(self, record: StepExecutionRecord) -> None:
        await asyncio.to_thread(
            self._execute,
            "INSERT INTO step_history (step_id, success, started_at, record) VALUES (?, ?, ?, ?)",
            record.step_id,
            int(record.success),
            record.start_time.isoformat(),
            record.to_json(),
        )

    async def all(self) -> list[StepExecutionRecord]:
        rows = await asyncio.to_thread(
            self._fetchall, "SELECT record FROM step_history ORDER BY id"
        )
        return self._to_records(rows)

    async def recent(self, n: int) -> list[StepExecutionRecord]:
        if n <= 0:
            return []
        rows = await asyncio.to_thread(
            self._fetchall,
            "SELECT record FROM (SELECT id, record FROM step_history ORDER BY id DESC LIMIT ?) ORDER BY id",
            n,
        )
        return self._to_records(rows)

    async def clear(self) -> None:
        await asyncio.to_thread(self._execute, "DELETE FROM step_history")

    def close(self) -> None:
        with self._lock:
            self._conn.close()
