"""Abstract base class for event-tracking store providers.

Used for search analytics writes such as "the user picked this suggestion".
Writes are fire-and-forget from the caller's point of view; a failing
store must never block the search UX.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class IEventStore(ABC):
    """Contract for append-only analytics event stores."""

    @abstractmethod
    async def record(self, kind: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Persist one analytics event.

        Parameters
        ----------
        kind:
            Event kind, e.g. ``"suggestion_selected"``.
        payload:
            JSON-serialisable event body.

        Returns
        -------
        dict
            An acknowledgement; at minimum contains ``kind``.

        Raises
        ------
        StoreError
            On transport or write failure.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
