"""Fire-and-forget analytics write for picked suggestions."""

from __future__ import annotations

import asyncio
import uuid
from typing import Any

import structlog

from quicksearch.interfaces.event_store import IEventStore
from quicksearch.interfaces.scheduler import IScheduler
from quicksearch.utils.errors import StoreRecordError
from quicksearch.utils.logging import get_logger

SUGGESTION_SELECTED = "suggestion_selected"


class SelectionRecorder:
    """Records suggestion picks to the event store without blocking the caller.

    Each recorder carries one ``session_id`` so every pick made from the same
    search box can be grouped in ``search_analytics``.

    Parameters
    ----------
    event_store:
        Where selection events are written.
    scheduler:
        Used to start the write in the background.
    session_id:
        Analytics session id; a random UUID when omitted.
    """

    def __init__(
        self,
        event_store: IEventStore,
        scheduler: IScheduler,
        session_id: str | None = None,
    ) -> None:
        self._event_store = event_store
        self._scheduler = scheduler
        self._session_id = session_id or str(uuid.uuid4())
        self._tasks: set[asyncio.Task] = set()
        self._closed = False
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def event_store(self) -> IEventStore:
        return self._event_store

    def record(self, identity: str | None, suggestion_text: str) -> asyncio.Task | None:
        """Start one write for a picked suggestion.

        Returns the background task, or ``None`` when nothing was written
        (no identity, or the recorder is closed).  The task never raises.
        """
        if not identity or self._closed:
            return None

        payload: dict[str, Any] = {
            "user_id": identity,
            "session_id": self._session_id,
            "search_query": suggestion_text,
            "search_type": "text",
            "source": "suggestion",
        }
        task = self._scheduler.spawn(self._write(payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every outstanding write to settle."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Stop accepting new writes.  Writes already started still finish."""
        self._closed = True

    async def _write(self, payload: dict[str, Any]) -> dict[str, Any] | None:
        try:
            ack = await self._event_store.record(SUGGESTION_SELECTED, payload)
        except Exception as exc:
            error = StoreRecordError.wrap(exc)
            self._logger.warning(
                "selection_record_failed",
                provider=error.provider_name or self._event_store.get_provider_name(),
                query=payload["search_query"],
                error=str(error),
            )
            return None

        self._logger.debug("selection_recorded", query=payload["search_query"])
        return ack
