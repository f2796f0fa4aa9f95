"""Abstract base class for suggestion (trend) store providers.

The controller only ever asks one question of the store: "what are the top
*limit* known queries starting with *prefix*?".  Implementations may answer
from an in-process table, a PostgREST endpoint, or a cache in front of
either.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from quicksearch.models.suggestion import Suggestion


class ISuggestionStore(ABC):
    """Contract for prefix-ranked suggestion lookups.

    All operations are async so network-backed stores do not block the
    event loop.
    """

    @abstractmethod
    async def search(self, prefix: str, limit: int) -> list[Suggestion]:
        """Return up to *limit* suggestions for *prefix*.

        Parameters
        ----------
        prefix:
            The user's query text as typed.
        limit:
            Maximum number of suggestions to return.

        Returns
        -------
        list[Suggestion]
            Ordered by descending weight.  Callers treat this order as
            authoritative, including among equal weights.

        Raises
        ------
        StoreError
            On transport or query failure.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
