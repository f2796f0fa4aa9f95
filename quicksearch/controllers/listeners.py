"""Observer registry shared by the controllers.

A renderer registers a callback and is told about every state change.
Callbacks may be sync or async; async ones are started on the controller's
scheduler and tracked until done.  A listener that raises is logged and
skipped.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import structlog

from quicksearch.interfaces.scheduler import IScheduler


class ListenerSet:
    """Ordered, de-duplicated set of state-change callbacks."""

    def __init__(self, scheduler: IScheduler, logger: structlog.BoundLogger) -> None:
        self._scheduler = scheduler
        self._logger = logger
        self._listeners: list[Callable[[Any], Any]] = []
        self._tasks: set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._listeners)

    def register(self, callback: Callable[[Any], Any]) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def unregister(self, callback: Callable[[Any], Any]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def close(self) -> None:
        """Drop every listener and cancel async listeners still running."""
        self._listeners.clear()
        for task in list(self._tasks):
            task.cancel()

    async def drain(self) -> None:
        """Wait for every async listener started by :meth:`notify` to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def notify(self, value: Any) -> None:
        """Invoke every listener with *value*."""
        for callback in list(self._listeners):
            try:
                result = callback(value)
                if asyncio.iscoroutine(result):
                    task = self._scheduler.spawn(self._await_listener(callback, result))
                    self._tasks.add(task)
                    task.add_done_callback(self._tasks.discard)
            except Exception as exc:
                self._log_error(callback, exc)

    async def _await_listener(self, callback: Callable[[Any], Any], result: Any) -> None:
        try:
            await result
        except Exception as exc:
            self._log_error(callback, exc)

    def _log_error(self, callback: Callable[[Any], Any], exc: Exception) -> None:
        self._logger.warning(
            "listener_callback_error",
            error=str(exc),
            callback=getattr(callback, "__name__", repr(callback)),
        )
