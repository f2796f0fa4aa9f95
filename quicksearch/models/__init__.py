"""Pydantic models shared by the controllers and store adapters."""

from quicksearch.models.suggestion import (
    Suggestion,
    SuggestionOptions,
    SuggestionState,
    TransientFlagOptions,
)
from quicksearch.models.view import ViewMode

__all__ = [
    "Suggestion",
    "SuggestionOptions",
    "SuggestionState",
    "TransientFlagOptions",
    "ViewMode",
]
