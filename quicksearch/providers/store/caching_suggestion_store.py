"""TTL cache in front of any suggestion store, using cachetools.TTLCache.

Repeated prefixes (typing, deleting, retyping) are answered from memory
for ``ttl`` seconds.  Failures are never cached, so a transient outage does
not pin an empty panel.
"""

from __future__ import annotations

import structlog
from cachetools import TTLCache

from quicksearch.interfaces.suggestion_store import ISuggestionStore
from quicksearch.models.suggestion import Suggestion

logger = structlog.get_logger(logger_name=__name__)


class CachingSuggestionStore(ISuggestionStore):
    """Read-through cache wrapping another :class:`ISuggestionStore`.

    Parameters
    ----------
    inner:
        The store that answers cache misses.
    max_size:
        Maximum number of cached prefixes before LRU eviction.
    ttl:
        Time-to-live in seconds for each cached result.
    """

    def __init__(self, inner: ISuggestionStore, max_size: int = 256, ttl: int = 60) -> None:
        self._inner = inner
        self._cache: TTLCache[tuple[str, int], tuple[Suggestion, ...]] = TTLCache(
            maxsize=max_size, ttl=ttl
        )

    async def search(self, prefix: str, limit: int) -> list[Suggestion]:
        key = (prefix.strip().lower(), limit)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("cache_hit", prefix=prefix, limit=limit)
            return list(cached)

        logger.debug("cache_miss", prefix=prefix, limit=limit)
        result = await self._inner.search(prefix, limit)
        self._cache[key] = tuple(result)
        return list(result)

    def invalidate(self) -> None:
        """Drop every cached prefix (e.g. after the signed-in user changes)."""
        self._cache.clear()
        logger.debug("cache_invalidated")

    def get_provider_name(self) -> str:
        return f"cached:{self._inner.get_provider_name()}"
