"""quicksearch wiring.

Builds a ready-to-use search session (suggestion controller, selection
recorder and map status hint) from the config resolved by :func:`load_config`
(YAML file with :class:`Settings` layered on top), choosing the store
adapters the same way for every caller:

    trend_store.remote  -> RestTrendStore (+ CachingSuggestionStore),
                           event kinds routed by trend_store.event_tables
    otherwise           -> MemorySuggestionStore / MemoryEventStore

Explicitly passed stores always win over the config-based choice.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from quicksearch.config.loader import load_config
from quicksearch.config.settings import Settings
from quicksearch.controllers.map_status_hint import MapStatusHint
from quicksearch.controllers.selection_recorder import SelectionRecorder
from quicksearch.controllers.suggestion_controller import DiagnosticSink, SuggestionController
from quicksearch.controllers.transient_flag_timer import TransientFlagTimer
from quicksearch.interfaces.event_store import IEventStore
from quicksearch.interfaces.scheduler import IScheduler
from quicksearch.interfaces.suggestion_store import ISuggestionStore
from quicksearch.models.suggestion import SuggestionOptions, TransientFlagOptions, coerce_options
from quicksearch.providers.scheduler.asyncio_scheduler import AsyncioScheduler
from quicksearch.providers.store.caching_suggestion_store import CachingSuggestionStore
from quicksearch.providers.store.memory_event_store import MemoryEventStore
from quicksearch.providers.store.memory_suggestion_store import MemorySuggestionStore
from quicksearch.providers.store.rest_trend_store import RestTrendStore
from quicksearch.utils.errors import ConfigurationError
from quicksearch.utils.logging import get_logger


@dataclass
class SearchSession:
    """Everything one search screen needs, torn down together."""

    controller: SuggestionController
    recorder: SelectionRecorder
    map_hint: MapStatusHint
    scheduler: IScheduler
    http_client: httpx.AsyncClient | None = field(default=None, repr=False)

    def close(self) -> None:
        """Cancel every timer and async listener and orphan every in-flight fetch."""
        self.controller.close()
        self.recorder.close()
        self.map_hint.close()

    async def aclose(self) -> None:
        """:meth:`close`, then wait for background work and release the HTTP client."""
        self.close()
        await self.controller.drain()
        await self.recorder.drain()
        await self.map_hint.drain()
        if self.http_client is not None:
            await self.http_client.aclose()


def _event_tables(trend_config: dict[str, Any]) -> dict[str, str] | None:
    tables = trend_config.get("event_tables")
    if tables is None:
        return None
    if not isinstance(tables, dict) or not all(
        isinstance(k, str) and isinstance(v, str) and v for k, v in tables.items()
    ):
        raise ConfigurationError(
            f"trend_store.event_tables must map event kinds to table names, got {tables!r}"
        )
    return tables


def _build_stores(
    config: dict[str, Any],
    api_key: str = "",
) -> tuple[ISuggestionStore, IEventStore, httpx.AsyncClient | None]:
    """Pick store adapters from the resolved config.  Returns (suggestions, events, owned client)."""
    logger: structlog.BoundLogger = get_logger(__name__)
    trend_config = config.get("trend_store", {})
    suggestion_config = config.get("suggestions", {})

    if not trend_config.get("remote"):
        logger.info("using_memory_stores")
        return MemorySuggestionStore(), MemoryEventStore(), None

    event_tables = _event_tables(trend_config)
    http_client = httpx.AsyncClient()
    rest_store = RestTrendStore(
        http_client,
        base_url=trend_config["url"],
        api_key=api_key,
        timeout=trend_config.get("timeout_s", 10.0),
        event_tables=event_tables,
    )
    suggestion_store: ISuggestionStore = rest_store
    cache_ttl = suggestion_config.get("cache_ttl_s", 0)
    if cache_ttl > 0:
        suggestion_store = CachingSuggestionStore(
            rest_store,
            max_size=suggestion_config.get("cache_size", 256),
            ttl=cache_ttl,
        )
    logger.info(
        "using_rest_trend_store",
        url=trend_config["url"],
        cached=suggestion_store is not rest_store,
        event_tables=sorted(rest_store.event_tables),
    )
    return suggestion_store, rest_store, http_client


def build_search_session(
    settings: Settings | None = None,
    suggestion_store: ISuggestionStore | None = None,
    event_store: IEventStore | None = None,
    identity: str | None = None,
    scheduler: IScheduler | None = None,
    diagnostic_sink: DiagnosticSink | None = None,
    config_path: str = "config/config.yaml",
    **overrides: Any,
) -> SearchSession:
    """Assemble a :class:`SearchSession`.

    Logging is left as the host configured it; call
    :func:`~quicksearch.utils.logging.configure_logging` once at startup.

    Parameters
    ----------
    settings:
        Application settings; read from the environment when omitted.
    suggestion_store, event_store:
        Explicit store adapters.  Any store left as ``None`` is built from
        the resolved config.
    identity:
        Signed-in user id.  Selections are only recorded when set.
    scheduler:
        Defaults to :class:`AsyncioScheduler` on the running loop.
    diagnostic_sink:
        Receives suggestion fetch failures.
    config_path:
        YAML file layered under *settings* by :func:`load_config`.  A missing
        file is treated as empty.
    overrides:
        Extra :class:`SuggestionOptions` fields that win over the config.
    """
    app_settings = settings if settings is not None else Settings()
    config = load_config(config_path, settings=app_settings)
    suggestion_config = config["suggestions"]
    hint_config = config["hints"]

    http_client: httpx.AsyncClient | None = None
    if suggestion_store is None or event_store is None:
        built_suggestions, built_events, http_client = _build_stores(
            config, api_key=app_settings.trend_store_api_key
        )
        if suggestion_store is None:
            suggestion_store = built_suggestions
        if event_store is None:
            event_store = built_events

    if scheduler is None:
        scheduler = AsyncioScheduler()

    options = coerce_options(
        SuggestionOptions,
        {
            "identity": identity,
            "min_query_length": suggestion_config["min_query_length"],
            "debounce_ms": suggestion_config["debounce_ms"],
            "result_limit": suggestion_config["result_limit"],
            **overrides,
        },
    )

    recorder = SelectionRecorder(event_store, scheduler)
    controller = SuggestionController(
        suggestion_store,
        scheduler,
        options=options,
        recorder=recorder,
        diagnostic_sink=diagnostic_sink,
    )
    hint_timer = TransientFlagTimer(
        scheduler,
        coerce_options(
            TransientFlagOptions,
            {"default_duration_ms": hint_config["default_duration_ms"]},
        ),
        name="map_status_hint",
    )
    map_hint = MapStatusHint(hint_timer, duration_ms=hint_config["map_duration_ms"])

    return SearchSession(
        controller=controller,
        recorder=recorder,
        map_hint=map_hint,
        scheduler=scheduler,
        http_client=http_client,
    )
