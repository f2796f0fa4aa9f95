"""Unit tests for the suggestion and event store providers."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from quicksearch.interfaces.suggestion_store import ISuggestionStore
from quicksearch.models.suggestion import Suggestion
from quicksearch.providers.store.caching_suggestion_store import CachingSuggestionStore
from quicksearch.providers.store.memory_event_store import MemoryEventStore
from quicksearch.providers.store.memory_suggestion_store import MemorySuggestionStore
from quicksearch.providers.store.rest_trend_store import RestTrendStore
from quicksearch.utils.errors import StoreError

# ======================================================================
# MemorySuggestionStore
# ======================================================================


class TestMemorySuggestionStore:
    @pytest.fixture()
    def store(self) -> MemorySuggestionStore:
        return MemorySuggestionStore(
            {
                "plumber": 100,
                "Plumbing repair": 40,
                "plumbing": 40,
                "painter": 80,
                "pool cleaning": 5,
            }
        )

    @pytest.mark.asyncio
    async def test_prefix_match_by_weight(self, store: MemorySuggestionStore) -> None:
        result = await store.search("plumb", 5)
        assert [s.text for s in result] == ["plumber", "Plumbing repair", "plumbing"]

    @pytest.mark.asyncio
    async def test_case_insensitive(self, store: MemorySuggestionStore) -> None:
        result = await store.search("PAI", 5)
        assert result == [Suggestion(text="painter", weight=80)]

    @pytest.mark.asyncio
    async def test_ties_keep_insertion_order(self, store: MemorySuggestionStore) -> None:
        result = await store.search("plumbing", 5)
        assert [s.text for s in result] == ["Plumbing repair", "plumbing"]

    @pytest.mark.asyncio
    async def test_limit(self, store: MemorySuggestionStore) -> None:
        result = await store.search("p", 2)
        assert [s.text for s in result] == ["plumber", "painter"]

    @pytest.mark.asyncio
    async def test_blank_prefix_returns_nothing(self, store: MemorySuggestionStore) -> None:
        assert await store.search("   ", 5) == []

    @pytest.mark.asyncio
    async def test_bump_adds_and_reranks(self, store: MemorySuggestionStore) -> None:
        assert store.bump("pool cleaning", by=200) == 205
        assert store.bump("pest control") == 1

        result = await store.search("p", 1)
        assert result[0].text == "pool cleaning"

    def test_provider_name(self, store: MemorySuggestionStore) -> None:
        assert store.get_provider_name() == "memory_suggestion_store"


# ======================================================================
# MemoryEventStore
# ======================================================================


class TestMemoryEventStore:
    @pytest.mark.asyncio
    async def test_record_appends_and_acks(self) -> None:
        store = MemoryEventStore()
        ack = await store.record("suggestion_selected", {"search_query": "plumber"})

        assert ack["kind"] == "suggestion_selected"
        assert ack["id"]
        assert store.events[0]["payload"] == {"search_query": "plumber"}

    @pytest.mark.asyncio
    async def test_configured_failure(self) -> None:
        store = MemoryEventStore(fail_with="read-only replica")
        with pytest.raises(StoreError) as exc_info:
            await store.record("suggestion_selected", {})

        assert exc_info.value.provider_name == "memory_event_store"
        assert store.events == []


# ======================================================================
# CachingSuggestionStore
# ======================================================================


class TestCachingSuggestionStore:
    @pytest.fixture()
    def inner(self) -> AsyncMock:
        inner = AsyncMock(spec=ISuggestionStore)
        inner.search.return_value = [Suggestion(text="plumber", weight=100)]
        inner.get_provider_name = MagicMock(return_value="inner")
        return inner

    @pytest.mark.asyncio
    async def test_second_lookup_is_cached(self, inner: AsyncMock) -> None:
        store = CachingSuggestionStore(inner, max_size=10, ttl=60)

        first = await store.search("plumb", 5)
        second = await store.search("PLUMB ", 5)

        assert first == second
        inner.search.assert_awaited_once_with("plumb", 5)

    @pytest.mark.asyncio
    async def test_limit_is_part_of_key(self, inner: AsyncMock) -> None:
        store = CachingSuggestionStore(inner)
        await store.search("plumb", 5)
        await store.search("plumb", 3)
        assert inner.search.await_count == 2

    @pytest.mark.asyncio
    async def test_failures_are_not_cached(self, inner: AsyncMock) -> None:
        inner.search.side_effect = [StoreError("down"), [Suggestion(text="plumber", weight=1)]]
        store = CachingSuggestionStore(inner)

        with pytest.raises(StoreError):
            await store.search("plumb", 5)
        result = await store.search("plumb", 5)

        assert result == [Suggestion(text="plumber", weight=1)]

    @pytest.mark.asyncio
    async def test_invalidate(self, inner: AsyncMock) -> None:
        store = CachingSuggestionStore(inner)
        await store.search("plumb", 5)
        store.invalidate()
        await store.search("plumb", 5)
        assert inner.search.await_count == 2

    @pytest.mark.asyncio
    async def test_returned_list_is_a_copy(self, inner: AsyncMock) -> None:
        store = CachingSuggestionStore(inner)
        first = await store.search("plumb", 5)
        first.clear()
        assert len(await store.search("plumb", 5)) == 1

    def test_provider_name(self, inner: AsyncMock) -> None:
        assert CachingSuggestionStore(inner).get_provider_name() == "cached:inner"


# ======================================================================
# RestTrendStore
# ======================================================================


def _response(status_code: int = 200, body=None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json = MagicMock(return_value=body)
    return response


class TestRestTrendStore:
    @pytest.fixture()
    def client(self) -> AsyncMock:
        return AsyncMock(spec=httpx.AsyncClient)

    @pytest.fixture()
    def store(self, client: AsyncMock) -> RestTrendStore:
        return RestTrendStore(client, base_url="https://example.test/", api_key="anon-key")

    @pytest.mark.asyncio
    async def test_search_request_shape(self, client: AsyncMock, store: RestTrendStore) -> None:
        client.get.return_value = _response(body=[])

        await store.search("plumb", 5)

        args, kwargs = client.get.call_args
        assert args[0] == "https://example.test/rest/v1/search_trends"
        assert kwargs["params"] == {
            "select": "query,search_count",
            "query": "ilike.plumb*",
            "order": "search_count.desc",
            "limit": "20",
        }
        assert kwargs["headers"]["apikey"] == "anon-key"
        assert kwargs["headers"]["Authorization"] == "Bearer anon-key"
        assert kwargs["timeout"] == 10.0

    @pytest.mark.asyncio
    async def test_search_dedupes_hourly_rows(self, client: AsyncMock, store: RestTrendStore) -> None:
        client.get.return_value = _response(
            body=[
                {"query": "plumber", "search_count": 90},
                {"query": "Plumber", "search_count": 60},
                {"query": "plumbing", "search_count": 50},
                {"query": "plumber", "search_count": 10},
                {"query": "", "search_count": 5},
                {"query": "plumb bob", "search_count": None},
            ]
        )

        result = await store.search("plumb", 5)

        assert result == [
            Suggestion(text="plumber", weight=90),
            Suggestion(text="plumbing", weight=50),
            Suggestion(text="plumb bob", weight=0),
        ]

    @pytest.mark.asyncio
    async def test_search_truncates_to_limit(self, client: AsyncMock, store: RestTrendStore) -> None:
        client.get.return_value = _response(
            body=[{"query": f"plumb {i}", "search_count": 100 - i} for i in range(10)]
        )
        result = await store.search("plumb", 3)
        assert [s.text for s in result] == ["plumb 0", "plumb 1", "plumb 2"]

    @pytest.mark.asyncio
    async def test_filter_characters_stripped(self, client: AsyncMock, store: RestTrendStore) -> None:
        client.get.return_value = _response(body=[])
        await store.search("50%,off*", 5)
        assert client.get.call_args.kwargs["params"]["query"] == "ilike.50off*"

    @pytest.mark.asyncio
    async def test_blank_prefix_skips_request(self, client: AsyncMock, store: RestTrendStore) -> None:
        assert await store.search("%*", 5) == []
        client.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_api_key_no_auth_headers(self, client: AsyncMock) -> None:
        client.get.return_value = _response(body=[])
        store = RestTrendStore(client, base_url="https://example.test")
        await store.search("plumb", 5)
        headers = client.get.call_args.kwargs["headers"]
        assert "apikey" not in headers
        assert "Authorization" not in headers

    @pytest.mark.asyncio
    async def test_search_transport_error(self, client: AsyncMock, store: RestTrendStore) -> None:
        client.get.side_effect = httpx.ConnectError("connection refused")
        with pytest.raises(StoreError) as exc_info:
            await store.search("plumb", 5)
        assert exc_info.value.provider_name == "rest_trend_store"

    @pytest.mark.asyncio
    async def test_search_http_error(self, client: AsyncMock, store: RestTrendStore) -> None:
        client.get.return_value = _response(status_code=503)
        with pytest.raises(StoreError, match="503"):
            await store.search("plumb", 5)

    @pytest.mark.asyncio
    async def test_search_invalid_json(self, client: AsyncMock, store: RestTrendStore) -> None:
        response = _response()
        response.json.side_effect = ValueError("Expecting value")
        client.get.return_value = response
        with pytest.raises(StoreError, match="invalid JSON"):
            await store.search("plumb", 5)

    @pytest.mark.asyncio
    async def test_search_unexpected_shape(self, client: AsyncMock, store: RestTrendStore) -> None:
        client.get.return_value = _response(body={"message": "permission denied"})
        with pytest.raises(StoreError):
            await store.search("plumb", 5)

    @pytest.mark.asyncio
    async def test_record_posts_to_mapped_table(self, client: AsyncMock, store: RestTrendStore) -> None:
        client.post.return_value = _response(status_code=201)
        payload = {"user_id": "u1", "search_query": "plumber"}

        ack = await store.record("suggestion_selected", payload)

        args, kwargs = client.post.call_args
        assert args[0] == "https://example.test/rest/v1/search_analytics"
        assert kwargs["json"] == payload
        assert kwargs["headers"]["Prefer"] == "return=minimal"
        assert ack == {"kind": "suggestion_selected", "table": "search_analytics", "status": 201}

    @pytest.mark.asyncio
    async def test_record_unknown_kind(self, client: AsyncMock, store: RestTrendStore) -> None:
        with pytest.raises(StoreError, match="No table mapped"):
            await store.record("page_view", {})
        client.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_record_http_error(self, client: AsyncMock, store: RestTrendStore) -> None:
        client.post.return_value = _response(status_code=401)
        with pytest.raises(StoreError, match="401"):
            await store.record("suggestion_selected", {})

    @pytest.mark.asyncio
    async def test_record_transport_error(self, client: AsyncMock, store: RestTrendStore) -> None:
        client.post.side_effect = httpx.ReadTimeout("timed out")
        with pytest.raises(StoreError):
            await store.record("suggestion_selected", {})
