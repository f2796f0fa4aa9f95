"""quicksearch: debounced search suggestions and transient UI hints.

Typical use::

    session = build_search_session(identity=user_id)
    session.controller.update_query("plumb")
    ...
    await session.aclose()
"""

from quicksearch.controllers import (
    MapStatusHint,
    SelectionRecorder,
    SuggestionController,
    TransientFlagTimer,
)
from quicksearch.main import SearchSession, build_search_session
from quicksearch.models import Suggestion, SuggestionOptions, SuggestionState, TransientFlagOptions

__version__ = "0.1.0"

__all__ = [
    "MapStatusHint",
    "SearchSession",
    "SelectionRecorder",
    "Suggestion",
    "SuggestionController",
    "SuggestionOptions",
    "SuggestionState",
    "TransientFlagOptions",
    "TransientFlagTimer",
    "build_search_session",
]
