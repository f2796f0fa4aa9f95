"""Search-box and transient-hint controllers.

SuggestionController runs the debounced, epoch-guarded suggestion fetch.
TransientFlagTimer is the single-slot auto-dismiss flag; MapStatusHint
drives one from map-screen events.  SelectionRecorder writes suggestion
picks to the event store in the background.
"""

from quicksearch.controllers.map_status_hint import MapStatusHint
from quicksearch.controllers.selection_recorder import SUGGESTION_SELECTED, SelectionRecorder
from quicksearch.controllers.suggestion_controller import DiagnosticSink, SuggestionController
from quicksearch.controllers.transient_flag_timer import TransientFlagTimer

__all__ = [
    "DiagnosticSink",
    "MapStatusHint",
    "SUGGESTION_SELECTED",
    "SelectionRecorder",
    "SuggestionController",
    "TransientFlagTimer",
]
