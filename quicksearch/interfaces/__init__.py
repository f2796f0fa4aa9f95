"""Public interface definitions for external collaborators.

The controllers reach the outside world only through these abstract base
classes.  Concrete adapters live in ``quicksearch/providers/`` and are
injected at construction, so tests can substitute fakes without patching.

    Interface          ->  Concrete implementations
    ------------------------------------------------------------------
    ISuggestionStore   ->  MemorySuggestionStore, RestTrendStore,
                           CachingSuggestionStore
    IEventStore        ->  MemoryEventStore, RestTrendStore
    IScheduler         ->  AsyncioScheduler
"""

from quicksearch.interfaces.event_store import IEventStore
from quicksearch.interfaces.scheduler import IScheduler, ITimerHandle
from quicksearch.interfaces.suggestion_store import ISuggestionStore

__all__ = [
    "IEventStore",
    "IScheduler",
    "ISuggestionStore",
    "ITimerHandle",
]
