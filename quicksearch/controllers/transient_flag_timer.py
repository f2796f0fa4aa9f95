"""Single-slot auto-dismiss flag.

Backs short-lived UI affordances such as the map status hint: ``show``
raises the flag and schedules its own dismissal; showing again before the
dismissal fires replaces the pending timer (last writer wins), so the
flag stays up for the full duration of the most recent ``show``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import structlog

from quicksearch.controllers.listeners import ListenerSet
from quicksearch.interfaces.scheduler import IScheduler, ITimerHandle
from quicksearch.models.suggestion import TransientFlagOptions, coerce_options
from quicksearch.utils.errors import ConfigurationError
from quicksearch.utils.logging import get_logger


class TransientFlagTimer:
    """A boolean ``shown`` flag with at most one pending hide timer.

    Parameters
    ----------
    scheduler:
        Timer scheduler; the instance owns every handle it receives.
    options:
        :class:`TransientFlagOptions` or a mapping of its fields.
    name:
        Label used in log events, e.g. ``"map_status_hint"``.
    """

    def __init__(
        self,
        scheduler: IScheduler,
        options: TransientFlagOptions | Mapping[str, Any] | None = None,
        name: str = "transient_flag",
    ) -> None:
        self._options = coerce_options(TransientFlagOptions, options)
        self._scheduler = scheduler
        self._name = name
        self._logger: structlog.BoundLogger = get_logger(__name__)
        self._listeners = ListenerSet(scheduler, self._logger)
        self._shown = False
        self._hide_handle: ITimerHandle | None = None
        self._closed = False

    @property
    def shown(self) -> bool:
        return self._shown

    @property
    def pending(self) -> bool:
        """``True`` while a hide timer is scheduled."""
        return self._hide_handle is not None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def default_duration_ms(self) -> int:
        return self._options.default_duration_ms

    def show(self, duration_ms: int | None = None) -> None:
        """Raise the flag now and hide it after *duration_ms* (default from options)."""
        if self._closed:
            return
        if duration_ms is None:
            duration_ms = self._options.default_duration_ms
        if duration_ms < 0:
            raise ConfigurationError(f"duration_ms must be >= 0, got {duration_ms}")

        self._cancel_pending()
        self._hide_handle = self._scheduler.call_later(duration_ms, self._on_expired)
        self._logger.debug("transient_flag_shown", flag=self._name, duration_ms=duration_ms)
        self._set(True)

    def hide(self) -> None:
        """Lower the flag now and drop any pending hide.  Idempotent."""
        if self._closed:
            return
        self._cancel_pending()
        self._set(False)

    def close(self) -> None:
        """Cancel any pending hide; every call afterwards is a no-op."""
        if self._closed:
            return
        self._cancel_pending()
        self._closed = True
        self._listeners.close()

    async def drain(self) -> None:
        """Wait for async listeners started by flag changes to finish."""
        await self._listeners.drain()

    def register_listener(self, callback: Callable[[bool], Any]) -> None:
        """Call *callback* with the new flag value whenever it flips."""
        self._listeners.register(callback)

    def unregister_listener(self, callback: Callable[[bool], Any]) -> None:
        self._listeners.unregister(callback)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _on_expired(self) -> None:
        self._hide_handle = None
        if self._closed:
            return
        self._logger.debug("transient_flag_expired", flag=self._name)
        self._set(False)

    def _cancel_pending(self) -> None:
        if self._hide_handle is not None:
            self._hide_handle.cancel()
            self._hide_handle = None

    def _set(self, value: bool) -> None:
        if self._shown == value:
            return
        self._shown = value
        self._listeners.notify(value)
