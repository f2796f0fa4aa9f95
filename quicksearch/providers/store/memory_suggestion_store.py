"""In-process trend table answering prefix queries.

Suitable for development, demos and tests.  Each entry is a known query
and its search count; ``search`` returns the highest-count queries that
start with the given prefix.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import structlog

from quicksearch.interfaces.suggestion_store import ISuggestionStore
from quicksearch.models.suggestion import Suggestion

logger = structlog.get_logger(logger_name=__name__)


class MemorySuggestionStore(ISuggestionStore):
    """Dict-backed suggestion store.

    Parameters
    ----------
    trends:
        Initial ``{query: search_count}`` mapping.  Insertion order is kept
        and breaks ties between equal counts.
    """

    def __init__(self, trends: Mapping[str, float] | Iterable[tuple[str, float]] | None = None) -> None:
        self._trends: dict[str, float] = dict(trends or {})

    async def search(self, prefix: str, limit: int) -> list[Suggestion]:
        """Case-insensitive prefix match, highest count first."""
        needle = prefix.strip().lower()
        if not needle or limit <= 0:
            return []

        matches = [
            Suggestion(text=query, weight=count)
            for query, count in self._trends.items()
            if query.lower().startswith(needle)
        ]
        # sorted() is stable, so equal weights keep insertion order.
        matches = sorted(matches, key=lambda s: s.weight, reverse=True)[:limit]
        logger.debug("memory_store_search", prefix=prefix, hits=len(matches))
        return matches

    def bump(self, query: str, by: float = 1) -> float:
        """Increment the count for *query*, adding it if unknown.  Returns the new count."""
        self._trends[query] = self._trends.get(query, 0) + by
        return self._trends[query]

    def get_provider_name(self) -> str:
        return "memory_suggestion_store"
