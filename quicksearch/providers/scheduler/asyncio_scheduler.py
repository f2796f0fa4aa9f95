"""Scheduler backed by the running asyncio event loop."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

from quicksearch.interfaces.scheduler import IScheduler, ITimerHandle


class _AsyncioTimerHandle(ITimerHandle):
    """Adapts :class:`asyncio.TimerHandle` to :class:`ITimerHandle`."""

    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(IScheduler):
    """Schedules callbacks with ``loop.call_later`` and tasks with ``create_task``.

    Parameters
    ----------
    loop:
        Event loop to schedule on.  When omitted the loop running at call
        time is used, so the scheduler can be built before the loop starts.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ITimerHandle:
        handle = self._get_loop().call_later(max(0.0, delay_ms) / 1000.0, callback)
        return _AsyncioTimerHandle(handle)

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        return self._get_loop().create_task(coro)
