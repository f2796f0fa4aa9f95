"""PostgREST adapter for the ``search_trends`` and ``search_analytics`` tables.

Serves both store contracts from one endpoint:

- ``search`` reads ``search_trends`` (one row per query per hour, so the
  same query can appear several times) ordered by ``search_count``.
- ``record`` inserts analytics rows; the event kind picks the table.

The ``httpx.AsyncClient`` is injected for connection pooling and
testability.  No retries: a failed call raises :class:`StoreError` and the
controller decides what to do with it.
"""

from __future__ import annotations

from typing import Any

import httpx

from quicksearch.interfaces.event_store import IEventStore
from quicksearch.interfaces.suggestion_store import ISuggestionStore
from quicksearch.models.suggestion import Suggestion
from quicksearch.utils.errors import StoreError
from quicksearch.utils.logging import get_logger

_PROVIDER_NAME = "rest_trend_store"
_TRENDS_TABLE = "search_trends"
# search_trends holds hourly rows; over-fetch so dedup still fills the page.
_OVERFETCH_FACTOR = 4
# Characters with meaning inside a PostgREST ilike filter.
_FILTER_CHARS = str.maketrans("", "", "%*,()")

DEFAULT_EVENT_TABLES: dict[str, str] = {
    "suggestion_selected": "search_analytics",
}


class RestTrendStore(ISuggestionStore, IEventStore):
    """Suggestion and event store backed by a PostgREST endpoint.

    Parameters
    ----------
    http_client:
        Injected ``httpx.AsyncClient``.
    base_url:
        Project URL, e.g. ``https://abc.supabase.co``.  ``/rest/v1`` is
        appended.
    api_key:
        Sent as ``apikey`` and bearer token when non-empty.
    timeout:
        Per-request timeout in seconds.
    event_tables:
        Event kind to table mapping for :meth:`record`.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        api_key: str = "",
        timeout: float = 10.0,
        event_tables: dict[str, str] | None = None,
    ) -> None:
        self._http = http_client
        self._rest_url = base_url.rstrip("/") + "/rest/v1"
        self._api_key = api_key
        self._timeout = timeout
        self._event_tables = dict(event_tables or DEFAULT_EVENT_TABLES)
        self._logger = get_logger(__name__)

    @property
    def event_tables(self) -> dict[str, str]:
        """Event kind to table mapping used by :meth:`record` (a copy)."""
        return dict(self._event_tables)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["apikey"] = self._api_key
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    @staticmethod
    def _parse_rows(rows: Any, limit: int) -> list[Suggestion]:
        """Turn trend rows into suggestions, keeping the first row per query."""
        if not isinstance(rows, list):
            raise StoreError("Unexpected trend response shape", provider_name=_PROVIDER_NAME)

        seen: set[str] = set()
        suggestions: list[Suggestion] = []
        for row in rows:
            if not isinstance(row, dict):
                continue
            text = str(row.get("query") or "").strip()
            key = text.lower()
            if not text or key in seen:
                continue
            seen.add(key)
            suggestions.append(Suggestion(text=text, weight=float(row.get("search_count") or 0)))
            if len(suggestions) >= limit:
                break
        return suggestions

    # ------------------------------------------------------------------
    # ISuggestionStore implementation
    # ------------------------------------------------------------------

    async def search(self, prefix: str, limit: int) -> list[Suggestion]:
        needle = prefix.strip().translate(_FILTER_CHARS)
        if not needle or limit <= 0:
            return []

        params = {
            "select": "query,search_count",
            "query": f"ilike.{needle}*",
            "order": "search_count.desc",
            "limit": str(limit * _OVERFETCH_FACTOR),
        }
        try:
            response = await self._http.get(
                f"{self._rest_url}/{_TRENDS_TABLE}",
                params=params,
                headers=self._headers(),
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            self._logger.warning("trend_search_transport_error", prefix=prefix, error=str(exc))
            raise StoreError(f"Trend search failed: {exc}", provider_name=_PROVIDER_NAME) from exc

        if response.status_code != 200:
            raise StoreError(
                f"Trend search returned HTTP {response.status_code}",
                provider_name=_PROVIDER_NAME,
            )

        try:
            rows = response.json()
        except ValueError as exc:
            raise StoreError("Trend search returned invalid JSON", provider_name=_PROVIDER_NAME) from exc

        suggestions = self._parse_rows(rows, limit)
        self._logger.debug("trend_search", prefix=prefix, rows=len(rows), hits=len(suggestions))
        return suggestions

    # ------------------------------------------------------------------
    # IEventStore implementation
    # ------------------------------------------------------------------

    async def record(self, kind: str, payload: dict[str, Any]) -> dict[str, Any]:
        table = self._event_tables.get(kind)
        if table is None:
            raise StoreError(f"No table mapped for event kind '{kind}'", provider_name=_PROVIDER_NAME)

        headers = {**self._headers(), "Prefer": "return=minimal"}
        try:
            response = await self._http.post(
                f"{self._rest_url}/{table}",
                json=payload,
                headers=headers,
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            raise StoreError(f"Event insert failed: {exc}", provider_name=_PROVIDER_NAME) from exc

        if response.status_code not in (200, 201, 204):
            raise StoreError(
                f"Event insert returned HTTP {response.status_code}",
                provider_name=_PROVIDER_NAME,
            )

        return {"kind": kind, "table": table, "status": response.status_code}

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME
