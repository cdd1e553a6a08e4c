"""
Hit Songs API — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    ├── fake_backend: in-memory QueryBackend recording every remote query
    ├── sample_songs: song rows shaped like the Supabase projection
    └── test_client: HTTPX AsyncClient bound to an app serving fake_backend

Helpers:
    FakeBackend             in-memory QueryBackend
    make_postgrest_backend  SupabaseBackend over a real AsyncPostgrestClient
                            whose HTTP layer is an httpx.MockTransport
"""

import os
from typing import Any, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from postgrest import AsyncPostgrestClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any hitsongs imports
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_ANON_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from hitsongs.services.query_base import (  # noqa: E402
    ProcedureCall,
    QueryBackend,
    RemoteQuery,
    Selection,
)
from hitsongs.services.supabase_backend import SupabaseBackend  # noqa: E402


class FakeBackend(QueryBackend):
    """
    QueryBackend double.

    Returns `rows` for every query (or raises `error`) and appends each
    received Selection / ProcedureCall to `queries`.
    """

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None, error: Optional[Exception] = None):
        self.rows = rows or []
        self.error = error
        self.queries: List[RemoteQuery] = []
        self.closed = False

    async def select(self, selection: Selection):
        self.queries.append(selection)
        if self.error is not None:
            raise self.error
        return list(self.rows)

    async def call(self, procedure: ProcedureCall):
        self.queries.append(procedure)
        if self.error is not None:
            raise self.error
        return list(self.rows)

    async def health_check(self) -> bool:
        return self.error is None

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def sample_songs():
    return [
        {
            "song_id": 1001,
            "title": "Shape of You",
            "artist": {"artist_id": 7, "artist_name": "Ed Sheeran"},
            "genre": {"genre_id": 3, "genre_name": "pop"},
            "year": 2017,
            "bpm": 96,
            "energy": 65,
            "danceability": 83,
            "loudness": -3,
            "liveness": 9,
            "valence": 93,
            "duration": 234,
            "acousticness": 58,
            "speechiness": 8,
            "popularity": 84,
        },
        {
            "song_id": 1002,
            "title": "Perfect",
            "artist": {"artist_id": 7, "artist_name": "Ed Sheeran"},
            "genre": {"genre_id": 3, "genre_name": "pop"},
            "year": 2017,
            "bpm": 95,
            "energy": 45,
            "danceability": 60,
            "loudness": -6,
            "liveness": 11,
            "valence": 17,
            "duration": 263,
            "acousticness": 16,
            "speechiness": 2,
            "popularity": 82,
        },
    ]


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest_asyncio.fixture
async def test_client(fake_backend):
    """
    HTTPX AsyncClient talking to a fresh app that serves `fake_backend`.

    Usage:
        async def test_genres(test_client, fake_backend):
            fake_backend.rows = [...]
            response = await test_client.get("/api/genres")
    """
    from hitsongs.main import create_app

    app = create_app(backend=fake_backend)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


REST_URL = "http://supabase.test/rest/v1"


def postgrest_error(status: int, code: str, message: str) -> httpx.Response:
    """Error response shaped like PostgREST's JSON error body."""
    return httpx.Response(
        status, json={"code": code, "message": message, "details": None, "hint": None}
    )


def make_postgrest_backend(handler):
    """
    SupabaseBackend over a real AsyncPostgrestClient.

    `handler(request) -> httpx.Response` stands in for the remote service;
    every request it sees is appended to the returned list.
    """
    requests: List[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(record))
    client = AsyncPostgrestClient(REST_URL, http_client=http_client)
    return SupabaseBackend(client), requests
