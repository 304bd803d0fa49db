"""Cooperative cancellation for running sequences."""

from __future__ import annotations

import asyncio
from contextvars import ContextVar
from typing import Optional

_current_token: ContextVar[Optional["CancellationToken"]] = ContextVar(
    "stepharness_cancellation_token", default=None
)


class CancellationToken:
    """Signal shared between a caller and the steps it runs.

    The executor watches the token while a step action runs and cancels the
    action as soon as :meth:`cancel` is called. Actions that want to stop at
    a clean point can check :func:`current_token` themselves.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: Optional[str] = None

    def cancel(self, reason: Optional[str] = None) -> None:
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        await self._event.wait()


def current_token() -> Optional[CancellationToken]:
    """Return the token of the step running in this context, if any."""
    return _current_token.get()
