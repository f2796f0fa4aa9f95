"""Abstract timer and task scheduling seam.

Controllers never touch the event loop directly.  They receive a scheduler
at construction and own the handles it returns, so every delayed callback
and background task can be traced back to exactly one controller instance
and released when that instance is closed.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable, Coroutine
from typing import Any


class ITimerHandle(ABC):
    """A cancellable pending callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running.  Safe to call more than once."""

    @abstractmethod
    def cancelled(self) -> bool:
        """Return ``True`` if :meth:`cancel` was called before the callback ran."""


class IScheduler(ABC):
    """Contract for delayed callbacks and background tasks."""

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ITimerHandle:
        """Run *callback* once after *delay_ms* milliseconds.

        Parameters
        ----------
        delay_ms:
            Delay in milliseconds.  ``0`` runs on the next loop iteration.
        callback:
            A synchronous, zero-argument callable.
        """

    @abstractmethod
    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        """Start *coro* as a background task and return it."""
