"""Shared pytest fixtures for the quicksearch test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from typing import Any

import pytest

from quicksearch.config.settings import Settings
from quicksearch.interfaces.event_store import IEventStore
from quicksearch.interfaces.scheduler import IScheduler, ITimerHandle
from quicksearch.interfaces.suggestion_store import ISuggestionStore
from quicksearch.models.suggestion import Suggestion
from quicksearch.utils.errors import StoreError

# ---------------------------------------------------------------------------
# Manual scheduler
# ---------------------------------------------------------------------------


class _ManualHandle(ITimerHandle):
    def __init__(self, due: float, seq: int, callback: Callable[[], None]) -> None:
        self.due = due
        self.seq = seq
        self.callback = callback
        self._cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(IScheduler):
    """Scheduler whose clock only moves when a test calls :meth:`advance`.

    Timers fire in due order (ties in scheduling order).  Spawned coroutines
    run as real tasks on the test's event loop.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._seq = 0
        self._timers: list[_ManualHandle] = []
        self.spawned: list[asyncio.Task] = []

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ITimerHandle:
        self._seq += 1
        handle = _ManualHandle(self.now + max(0.0, delay_ms), self._seq, callback)
        self._timers.append(handle)
        return handle

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self.spawned.append(task)
        return task

    @property
    def pending_timers(self) -> int:
        return sum(1 for h in self._timers if not h.cancelled() and not h.fired)

    def advance(self, ms: float) -> None:
        target = self.now + ms
        while True:
            ready = [
                h for h in self._timers
                if not h.cancelled() and not h.fired and h.due <= target
            ]
            if not ready:
                break
            handle = min(ready, key=lambda h: (h.due, h.seq))
            self.now = handle.due
            handle.fired = True
            handle.callback()
        self.now = target


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


# ---------------------------------------------------------------------------
# Store fakes
# ---------------------------------------------------------------------------


@dataclass
class PendingSearch:
    prefix: str
    limit: int
    future: asyncio.Future = field(repr=False)

    def resolve(self, rows: list[Suggestion]) -> None:
        self.future.set_result(rows)

    def fail(self, message: str = "boom") -> None:
        self.future.set_exception(StoreError(message, provider_name="gated_store"))


class GatedSuggestionStore(ISuggestionStore):
    """Suggestion store whose answers are released by the test, in any order."""

    def __init__(self) -> None:
        self.calls: list[PendingSearch] = []

    async def search(self, prefix: str, limit: int) -> list[Suggestion]:
        pending = PendingSearch(prefix, limit, asyncio.get_running_loop().create_future())
        self.calls.append(pending)
        return await pending.future

    def get_provider_name(self) -> str:
        return "gated_store"


class RecordingEventStore(IEventStore):
    """Event store that keeps calls and optionally fails."""

    def __init__(self, fail: bool = False) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self._fail = fail

    async def record(self, kind: str, payload: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((kind, payload))
        if self._fail:
            raise StoreError("insert rejected", provider_name="recording_store")
        return {"kind": kind}

    def get_provider_name(self) -> str:
        return "recording_store"


@pytest.fixture
def gated_store() -> GatedSuggestionStore:
    return GatedSuggestionStore()


@pytest.fixture
def event_store() -> RecordingEventStore:
    return RecordingEventStore()


@pytest.fixture
def plumber() -> list[Suggestion]:
    return [Suggestion(text="plumber", weight=100)]


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def make_settings(**overrides: Any) -> Settings:
    """Build Settings with test-safe defaults, ignoring any local .env file."""
    defaults: dict[str, Any] = {
        "trend_store_url": "",
        "trend_store_api_key": "",
        "app_env": "test",
        "log_level": "WARNING",
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


async def settle() -> None:
    """Let already-runnable tasks and callbacks run."""
    for _ in range(5):
        await asyncio.sleep(0)
