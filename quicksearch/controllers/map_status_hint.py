"""Map status hint: the "showing N listings" overlay on the map view.

The hint pops up whenever what the map shows may have changed and fades
out on its own.  Triggers:

- switching the home screen into map view
- switching the map mode (e.g. listings vs. providers)
- changing filters while in map view
- zooming by at least half a level (zoom rounded to one decimal)
"""

from __future__ import annotations

import math

from quicksearch.controllers.transient_flag_timer import TransientFlagTimer
from quicksearch.models.view import ViewMode

_ZOOM_STEP = 0.5


def _round_zoom(zoom: float) -> float:
    # Half-up to one decimal; round() would use banker's rounding.
    return math.floor(zoom * 10 + 0.5) / 10


class MapStatusHint:
    """Drives a :class:`TransientFlagTimer` from map-screen events.

    Parameters
    ----------
    timer:
        The flag the hint renders from.
    duration_ms:
        How long each trigger keeps the hint up.
    zoom:
        Initial map zoom level.
    view_mode:
        Initial home-screen view mode.
    map_mode:
        Initial map mode.
    """

    def __init__(
        self,
        timer: TransientFlagTimer,
        duration_ms: int = 2000,
        zoom: float = 12.0,
        view_mode: ViewMode = ViewMode.GRID,
        map_mode: str = "listings",
    ) -> None:
        self._timer = timer
        self._duration_ms = duration_ms
        self._zoom = zoom
        self._view_mode = ViewMode(view_mode)
        self._map_mode = map_mode

    @property
    def shown(self) -> bool:
        return self._timer.shown

    @property
    def timer(self) -> TransientFlagTimer:
        return self._timer

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def view_mode(self) -> ViewMode:
        return self._view_mode

    @property
    def map_mode(self) -> str:
        return self._map_mode

    def trigger(self) -> None:
        """Show the hint for the configured duration, restarting any countdown."""
        self._timer.show(self._duration_ms)

    def on_view_mode_change(self, view_mode: ViewMode | str) -> None:
        """Record the view mode; switching into map view shows the hint."""
        previous = self._view_mode
        self._view_mode = ViewMode(view_mode)
        if self._view_mode is ViewMode.MAP and previous is not ViewMode.MAP:
            self.trigger()

    def on_map_mode_change(self, map_mode: str) -> None:
        if map_mode == self._map_mode:
            return
        self._map_mode = map_mode
        self.trigger()

    def on_filters_change(self) -> None:
        if self._view_mode is ViewMode.MAP:
            self.trigger()

    def on_zoom_change(self, zoom: float) -> bool:
        """Record a zoom change; returns ``True`` if it was large enough to trigger."""
        rounded = _round_zoom(zoom)
        if abs(rounded - self._zoom) < _ZOOM_STEP:
            return False
        self._zoom = rounded
        self.trigger()
        return True

    def close(self) -> None:
        self._timer.close()

    async def drain(self) -> None:
        await self._timer.drain()
