"""In-process analytics sink that keeps every recorded event in a list."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

import structlog

from quicksearch.interfaces.event_store import IEventStore
from quicksearch.utils.errors import StoreError

logger = structlog.get_logger(logger_name=__name__)


class MemoryEventStore(IEventStore):
    """List-backed event store.

    Parameters
    ----------
    fail_with:
        When set, every :meth:`record` call raises this message as a
        :class:`StoreError`.  Lets callers exercise the failure path
        without a network.
    """

    def __init__(self, fail_with: str | None = None) -> None:
        self._events: list[dict[str, Any]] = []
        self._fail_with = fail_with

    @property
    def events(self) -> list[dict[str, Any]]:
        """A copy of every event recorded so far, oldest first."""
        return list(self._events)

    async def record(self, kind: str, payload: dict[str, Any]) -> dict[str, Any]:
        if self._fail_with is not None:
            raise StoreError(self._fail_with, provider_name=self.get_provider_name())

        ack = {
            "id": str(uuid.uuid4()),
            "kind": kind,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self._events.append({**ack, "payload": dict(payload)})
        logger.debug("memory_event_recorded", kind=kind, total=len(self._events))
        return ack

    def get_provider_name(self) -> str:
        return "memory_event_store"
