"""
Hit Songs API — Supabase Backend Unit Tests
============================================

What:  Tests for SupabaseBackend, first with a mocked query-builder chain,
       then with a real AsyncPostgrestClient over httpx.MockTransport.
Why:   Tests should not make real API calls (requires network and credentials),
       but the postgrest-py request/response handling must still be exercised.

What we test:
    ✅ Selections become table().select().eq/ilike/order/limit chains
    ✅ Procedure calls become rpc(name, params)
    ✅ Every builder is sent with retries disabled
    ✅ APIError and httpx errors become RemoteQueryError with the right status
    ✅ Wire level: one request per query, JSON and non-JSON error bodies
    ✅ health_check() and close()
    ❌ Real Supabase calls
"""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from postgrest import AsyncPostgrestClient
from postgrest.exceptions import APIError

from hitsongs.exceptions import RemoteQueryError
from hitsongs.services import catalog
from hitsongs.services.supabase_backend import SupabaseBackend, status_for_code

from conftest import REST_URL, make_postgrest_backend, postgrest_error


def make_client(data=None, exc=None):
    """Mocked AsyncClient whose builder methods chain back to one builder."""
    builder = MagicMock()
    for name in ("select", "eq", "ilike", "order", "limit", "retry"):
        getattr(builder, name).return_value = builder
    builder.execute = AsyncMock(return_value=MagicMock(data=data), side_effect=exc)

    client = MagicMock()
    client.table.return_value = builder
    client.rpc.return_value = builder
    client.postgrest.aclose = AsyncMock()
    return client, builder


class TestSelect:

    @pytest.mark.asyncio
    async def test_equality_filter(self, sample_songs):
        client, builder = make_client(data=sample_songs)
        backend = SupabaseBackend(client)

        rows = await backend.select(catalog.song_by_id("1001"))

        assert rows == sample_songs
        client.table.assert_called_once_with("songs")
        builder.select.assert_called_once_with(*catalog.SONG_COLUMNS)
        builder.eq.assert_called_once_with("song_id", "1001")
        builder.order.assert_not_called()
        builder.limit.assert_not_called()
        builder.retry.assert_called_once_with(False)
        builder.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_pattern_filter(self):
        client, builder = make_client(data=[])
        await SupabaseBackend(client).select(catalog.songs_title_contains("love"))

        builder.ilike.assert_called_once_with("title", "%love%")

    @pytest.mark.asyncio
    async def test_order_and_limit(self):
        client, builder = make_client(data=[])
        await SupabaseBackend(client).select(catalog.top_songs_by("valence", 10))

        builder.order.assert_called_once_with("valence", desc=True)
        builder.limit.assert_called_once_with(10)

    @pytest.mark.asyncio
    async def test_order_by_embedded_column(self):
        client, builder = make_client(data=[])
        await SupabaseBackend(client).select(catalog.songs_sorted_by("genre"))

        builder.order.assert_called_once_with("genre(genre_name)", desc=False)

    @pytest.mark.asyncio
    async def test_none_data_becomes_empty_list(self):
        client, _ = make_client(data=None)
        assert await SupabaseBackend(client).select(catalog.all_genres()) == []


class TestCall:

    @pytest.mark.asyncio
    async def test_rpc_with_limit_count(self, sample_songs):
        client, builder = make_client(data=sample_songs)

        rows = await SupabaseBackend(client).call(
            catalog.top_songs_procedure("top_songs_coffee", 5)
        )

        assert rows == sample_songs
        client.rpc.assert_called_once_with("top_songs_coffee", {"limit_count": 5})
        builder.retry.assert_called_once_with(False)
        builder.execute.assert_awaited_once()


class TestErrorTranslation:

    @pytest.mark.asyncio
    async def test_api_error(self):
        api_error = APIError({
            "message": "column songs.nope does not exist",
            "code": "42703",
            "hint": "Perhaps you meant songs.note",
            "details": None,
        })
        client, _ = make_client(exc=api_error)

        with pytest.raises(RemoteQueryError) as exc_info:
            await SupabaseBackend(client).select(catalog.songs_sorted_by("nope"))

        error = exc_info.value
        assert error.message == "column songs.nope does not exist"
        assert error.code == "42703"
        assert error.hint == "Perhaps you meant songs.note"
        assert error.status == 400
        assert error.status_text == "Bad Request"

    @pytest.mark.asyncio
    async def test_unknown_code_has_no_status(self):
        client, _ = make_client(exc=APIError({"message": "odd", "code": "XY999"}))

        with pytest.raises(RemoteQueryError) as exc_info:
            await SupabaseBackend(client).select(catalog.all_songs())

        assert exc_info.value.status is None
        assert exc_info.value.http_status == 500

    @pytest.mark.asyncio
    async def test_integer_code_is_the_http_status(self):
        client, _ = make_client(exc=APIError({"message": "JSON could not be generated", "code": 502}))

        with pytest.raises(RemoteQueryError) as exc_info:
            await SupabaseBackend(client).select(catalog.all_songs())

        assert exc_info.value.status == 502
        assert exc_info.value.code == "502"

    @pytest.mark.asyncio
    async def test_transport_error(self):
        client, _ = make_client(exc=httpx.ConnectError("connection refused"))

        with pytest.raises(RemoteQueryError) as exc_info:
            await SupabaseBackend(client).call(catalog.top_songs_procedure("top_songs_studying", 20))

        assert "connection refused" in exc_info.value.message
        assert exc_info.value.details == "ConnectError"
        assert exc_info.value.http_status == 500

    @pytest.mark.parametrize(
        "code, status",
        [
            ("PGRST000", 503),
            ("PGRST003", 504),
            ("PGRST116", 406),
            ("PGRST123", 400),  # aggregates disabled: /api/artists/averages
            ("PGRST202", 404),  # mood procedure missing
            ("PGRST301", 401),
            ("42P01", 404),
            ("42703", 400),     # unknown sort column
            ("22P02", 400),     # non-numeric id
            ("23505", 409),
            ("25006", 405),
            ("40001", 409),
            ("P0001", 400),     # raise_exception inside a mood procedure
            ("28P01", 403),
            ("PT402", 402),
            ("404", 404),
            (502, 502),
        ],
    )
    def test_status_for_code(self, code, status):
        assert status_for_code(code) == status

    @pytest.mark.parametrize("code", [None, "", "ZZ000"])
    def test_status_for_unknown_code(self, code):
        assert status_for_code(code) is None


class TestPostgrestWire:
    """Real postgrest-py builders; only the HTTP layer is stubbed."""

    @pytest.mark.asyncio
    async def test_select_sends_one_filtered_get(self, sample_songs):
        backend, requests = make_postgrest_backend(
            lambda request: httpx.Response(200, json=sample_songs[:1])
        )

        rows = await backend.select(catalog.song_by_id("1001"))

        assert rows == sample_songs[:1]
        assert len(requests) == 1
        assert requests[0].method == "GET"
        assert requests[0].url.path == "/rest/v1/songs"
        assert requests[0].url.params["song_id"] == "eq.1001"

    @pytest.mark.asyncio
    async def test_top_songs_order_and_limit(self, sample_songs):
        backend, requests = make_postgrest_backend(
            lambda request: httpx.Response(200, json=sample_songs)
        )

        await backend.select(catalog.top_songs_by("danceability", 5))

        assert requests[0].url.params["order"] == "danceability.desc"
        assert requests[0].url.params["limit"] == "5"

    @pytest.mark.asyncio
    async def test_unavailable_service_is_not_retried(self):
        backend, requests = make_postgrest_backend(
            lambda request: postgrest_error(503, "PGRST000", "Could not connect with the database")
        )

        with pytest.raises(RemoteQueryError) as exc_info:
            await backend.select(catalog.song_by_id("5"))

        assert len(requests) == 1
        assert "x-retry-count" not in requests[0].headers
        assert exc_info.value.status == 503
        assert exc_info.value.message == "Could not connect with the database"

    @pytest.mark.asyncio
    async def test_json_error_body(self):
        backend, _ = make_postgrest_backend(
            lambda request: postgrest_error(400, "PGRST123", "Use of aggregate functions is not allowed")
        )

        with pytest.raises(RemoteQueryError) as exc_info:
            await backend.select(catalog.artist_averages("12"))

        assert exc_info.value.code == "PGRST123"
        assert exc_info.value.http_status == 400

    @pytest.mark.asyncio
    async def test_non_json_error_body(self):
        backend, requests = make_postgrest_backend(
            lambda request: httpx.Response(502, text="<html>Bad gateway</html>")
        )

        with pytest.raises(RemoteQueryError) as exc_info:
            await backend.select(catalog.all_songs())

        error = exc_info.value
        assert len(requests) == 1
        assert error.status == 502
        assert error.status_text == "Bad Gateway"
        assert error.code == "502"
        assert "Bad gateway" in error.details

    @pytest.mark.asyncio
    async def test_procedure_is_one_post(self, sample_songs):
        backend, requests = make_postgrest_backend(
            lambda request: httpx.Response(200, json=sample_songs)
        )

        rows = await backend.call(catalog.top_songs_procedure("top_songs_coffee", 5))

        assert rows == sample_songs
        assert len(requests) == 1
        assert requests[0].method == "POST"
        assert requests[0].url.path == "/rest/v1/rpc/top_songs_coffee"
        assert json.loads(requests[0].read()) == {"limit_count": 5}

    @pytest.mark.asyncio
    async def test_procedure_raise_exception(self):
        backend, _ = make_postgrest_backend(
            lambda request: postgrest_error(400, "P0001", "limit_count must be positive")
        )

        with pytest.raises(RemoteQueryError) as exc_info:
            await backend.call(catalog.top_songs_procedure("top_songs_studying", 3))

        assert exc_info.value.http_status == 400
        assert exc_info.value.message == "limit_count must be positive"


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_health_check_ok(self):
        client, builder = make_client(data=[{"genre_id": 1}])

        assert await SupabaseBackend(client).health_check() is True
        client.table.assert_called_once_with("genres")
        builder.limit.assert_called_once_with(1)

    @pytest.mark.asyncio
    async def test_health_check_failure(self):
        client, _ = make_client(exc=httpx.ConnectError("down"))
        assert await SupabaseBackend(client).health_check() is False

    @pytest.mark.asyncio
    async def test_close_supabase_client(self):
        client, _ = make_client()
        await SupabaseBackend(client).close()
        client.postgrest.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_postgrest_client(self):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        backend = SupabaseBackend(AsyncPostgrestClient(REST_URL, http_client=http_client))

        await backend.close()

        assert http_client.is_closed
