"""Execution history backends for stepharness."""

from __future__ import annotations

import os
from typing import Optional

from ..config import HarnessConfig, load_config
from ..constants import HISTORY_URL_ENV_VAR
from .inmemory import InMemoryHistoryLog
from .repository import HistoryLog
from .sqlite import SQLiteHistoryLog

_history_instance: HistoryLog | None = None


def get_history(
    url: Optional[str] = None, config: Optional[HarnessConfig] = None
) -> HistoryLog:
    """Factory function to obtain a history log.

    The backend is selected from ``url``, which can be provided explicitly,
    via the ``STEPHARNESS_HISTORY_URL`` environment variable, or from loaded
    configuration. Without a URL an in-memory log is returned. The last
    created log is reused when called without arguments.
    """

    global _history_instance
    if _history_instance is not None and url is None and config is None:
        return _history_instance

    config = config or load_config()
    url = url or os.getenv(HISTORY_URL_ENV_VAR) or config.history.url

    if not url:
        _history_instance = InMemoryHistoryLog()
        return _history_instance

    if url.startswith("sqlite://"):
        path = url.replace("sqlite://", "", 1)
        _history_instance = SQLiteHistoryLog(path)
    else:
        raise ValueError(f"Unsupported history backend: {url}")

    return _history_instance


__all__ = [
    "HistoryLog",
    "InMemoryHistoryLog",
    "SQLiteHistoryLog",
    "get_history",
]
