"""Suggestion and event store providers.

MemorySuggestionStore and MemoryEventStore keep everything in-process.
RestTrendStore talks to a PostgREST endpoint and serves both contracts.
CachingSuggestionStore puts a TTL cache in front of any suggestion store.
"""

from quicksearch.providers.store.caching_suggestion_store import CachingSuggestionStore
from quicksearch.providers.store.memory_event_store import MemoryEventStore
from quicksearch.providers.store.memory_suggestion_store import MemorySuggestionStore
from quicksearch.providers.store.rest_trend_store import RestTrendStore

__all__ = [
    "CachingSuggestionStore",
    "MemoryEventStore",
    "MemorySuggestionStore",
    "RestTrendStore",
]
