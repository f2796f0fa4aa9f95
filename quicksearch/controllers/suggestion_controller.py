"""Debounced, stale-safe search suggestion controller.

Typing restarts a debounce timer.  When it expires, a prefix query goes to
the suggestion store stamped with a fresh *epoch*.  When the query
settles, its result is applied only if its epoch is still the newest one;
anything older is dropped without touching state.

# ─── STATE MACHINE ─────────────────────────────────────────────────────
#
#   update_query("plu") ──► debounce pending ──(quiet for debounce_ms)──►
#       epoch += 1, loading ──► store.search() ──► settle(epoch)
#                                                    │
#                     epoch still current? ──yes──► apply result
#                                          └─no───► no-op
#
#   select / clear / empty query / close all bump the epoch, so a fetch
#   already in flight can never bring suggestions back afterwards.
# ──────────────────────────────────────────────────────────────────────

The transport may not support cancelling a request, so nothing is
cancelled; superseded requests run to completion and are ignored.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from typing import Any

import structlog

from quicksearch.controllers.listeners import ListenerSet
from quicksearch.controllers.selection_recorder import SelectionRecorder
from quicksearch.interfaces.scheduler import IScheduler, ITimerHandle
from quicksearch.interfaces.suggestion_store import ISuggestionStore
from quicksearch.models.suggestion import (
    Suggestion,
    SuggestionOptions,
    SuggestionState,
    coerce_options,
)
from quicksearch.utils.errors import StoreFetchError
from quicksearch.utils.logging import get_logger

DiagnosticSink = Callable[[StoreFetchError], None]


class SuggestionController:
    """Owns query text, debounce timing, fetch epoch and suggestion panel state.

    Parameters
    ----------
    store:
        Prefix-ranked suggestion source.
    scheduler:
        Timer and task scheduler.  The controller holds at most one
        debounce handle from it at a time.
    options:
        :class:`SuggestionOptions` or a mapping of its fields.
    recorder:
        Receives picks from :meth:`select_suggestion` when an identity is
        configured.
    diagnostic_sink:
        Called with a :class:`StoreFetchError` whenever the current fetch
        fails.  Failures are always logged as well.
    """

    def __init__(
        self,
        store: ISuggestionStore,
        scheduler: IScheduler,
        options: SuggestionOptions | Mapping[str, Any] | None = None,
        recorder: SelectionRecorder | None = None,
        diagnostic_sink: DiagnosticSink | None = None,
    ) -> None:
        self._options = coerce_options(SuggestionOptions, options)
        self._store = store
        self._scheduler = scheduler
        self._recorder = recorder
        self._diagnostic_sink = diagnostic_sink
        self._logger: structlog.BoundLogger = get_logger(__name__)
        self._listeners = ListenerSet(scheduler, self._logger)

        self._query = ""
        self._suggestions: tuple[Suggestion, ...] = ()
        self._visible = False
        self._loading = False
        self._epoch = 0
        self._debounce_handle: ITimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()
        self._closed = False
        self._last_state = self.state

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def options(self) -> SuggestionOptions:
        return self._options

    @property
    def query(self) -> str:
        return self._query

    @property
    def suggestions(self) -> tuple[Suggestion, ...]:
        return self._suggestions

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def debounce_pending(self) -> bool:
        return self._debounce_handle is not None

    @property
    def state(self) -> SuggestionState:
        return SuggestionState(
            query=self._query,
            suggestions=self._suggestions,
            visible=self._visible,
            loading=self._loading,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def update_query(self, text: str) -> None:
        """Set the query text and (re)start the debounce timer.

        Empty text clears and hides the panel immediately with no fetch.
        """
        if self._closed:
            return

        self._query = text
        self._cancel_debounce()
        if not text:
            self._reset_panel()
        else:
            self._debounce_handle = self._scheduler.call_later(
                self._options.debounce_ms, self._on_debounce_expired
            )
        self._publish()

    def select_suggestion(self, text: str) -> asyncio.Task | None:
        """Adopt *text* as the query, close the panel and record the pick.

        Returns the recorder's background task when a write was started.
        """
        if self._closed:
            return None

        self._cancel_debounce()
        self._query = text
        self._reset_panel()
        self._publish()

        identity = self._options.identity
        if identity and self._recorder is not None:
            return self._recorder.record(identity, text)
        return None

    def clear_search(self) -> None:
        """Empty the query, close the panel and drop any pending debounce."""
        if self._closed:
            return

        self._cancel_debounce()
        self._query = ""
        self._reset_panel()
        self._publish()

    def hide_suggestions(self) -> None:
        """Hide the panel, keeping query text and suggestions as they are."""
        if self._closed:
            return

        self._visible = False
        self._publish()

    def register_listener(self, callback: Callable[[SuggestionState], Any]) -> None:
        """Call *callback* with the new :class:`SuggestionState` after every change."""
        self._listeners.register(callback)

    def unregister_listener(self, callback: Callable[[SuggestionState], Any]) -> None:
        self._listeners.unregister(callback)

    async def drain(self) -> None:
        """Wait for every fetch and async listener this controller started to settle."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        await self._listeners.drain()

    def close(self) -> None:
        """Tear down: drop the pending debounce, make in-flight fetches stale
        and cancel async listeners still running.

        Every public operation is a no-op afterwards.
        """
        if self._closed:
            return

        self._cancel_debounce()
        self._epoch += 1
        self._closed = True
        self._listeners.close()
        self._logger.debug("suggestion_controller_closed", epoch=self._epoch)

    # ------------------------------------------------------------------
    # Debounce and fetch
    # ------------------------------------------------------------------

    def _on_debounce_expired(self) -> None:
        self._debounce_handle = None
        if self._closed:
            return

        text = self._query
        if len(text.strip()) < self._options.min_query_length:
            return

        self._epoch += 1
        epoch = self._epoch
        self._loading = True
        self._publish()

        self._logger.debug("suggestion_fetch_dispatched", query=text, epoch=epoch)
        task = self._scheduler.spawn(self._fetch(text, epoch))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _fetch(self, text: str, epoch: int) -> None:
        try:
            result = await self._store.search(text, self._options.result_limit)
            suggestions = tuple(_to_suggestion(item) for item in result or ())
        except Exception as exc:
            self._settle_failure(text, epoch, exc)
            return
        self._settle_success(text, epoch, suggestions)

    def _settle_success(self, text: str, epoch: int, suggestions: tuple[Suggestion, ...]) -> None:
        if epoch != self._epoch:
            self._logger.debug("suggestion_fetch_stale", query=text, epoch=epoch, current=self._epoch)
            return

        self._suggestions = suggestions
        self._visible = bool(self._suggestions)
        self._loading = False
        self._logger.debug(
            "suggestion_fetch_applied", query=text, epoch=epoch, count=len(self._suggestions)
        )
        self._publish()

    def _settle_failure(self, text: str, epoch: int, exc: Exception) -> None:
        if epoch != self._epoch:
            self._logger.debug("suggestion_fetch_stale", query=text, epoch=epoch, current=self._epoch)
            return

        self._suggestions = ()
        self._visible = False
        self._loading = False
        self._publish()

        error = StoreFetchError.wrap(exc)
        self._logger.warning(
            "suggestion_fetch_failed",
            query=text,
            epoch=epoch,
            provider=error.provider_name or self._store.get_provider_name(),
            error=str(error),
        )
        if self._diagnostic_sink is not None:
            try:
                self._diagnostic_sink(error)
            except Exception as sink_exc:
                self._logger.warning("diagnostic_sink_error", error=str(sink_exc))

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _cancel_debounce(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

    def _reset_panel(self) -> None:
        """Clear and hide the panel and orphan any in-flight fetch."""
        self._epoch += 1
        self._suggestions = ()
        self._visible = False
        self._loading = False

    def _publish(self) -> None:
        state = self.state
        if state == self._last_state:
            return
        self._last_state = state
        self._listeners.notify(state)


def _to_suggestion(item: Any) -> Suggestion:
    if isinstance(item, Suggestion):
        return item
    return Suggestion.model_validate(item)
