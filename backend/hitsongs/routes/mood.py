"""
Hit Songs API — Mood Route Handlers
====================================

What:  Top-N song rankings for four moods. N is the optional `ref` path
       segment (1-20, default 20; see services.parameters.parse_count).

Rankings:
    dancing   danceability desc                 (PostgREST order + limit)
    happy     valence desc                      (PostgREST order + limit)
    coffee    liveness / acousticness desc      (rpc top_songs_coffee)
    studying  energy * speechiness desc         (rpc top_songs_studying)

    PostgREST cannot order by an expression, so the last two rankings are
    stored functions taking a single `limit_count` argument.

Each mood is registered twice, with and without the count segment, so that
`?ref=` is never accepted as a query parameter.
"""

from typing import Callable, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from hitsongs.database import get_backend
from hitsongs.responses import build_response
from hitsongs.schemas.catalog import ERROR_RESPONSES, InvalidParameterResponse, SongList
from hitsongs.services import catalog
from hitsongs.services.parameters import parse_count
from hitsongs.services.query_base import QueryBackend, RemoteQuery

router = APIRouter(prefix="/api/mood", tags=["Mood"])

MOOD_RESPONSES = {
    200: {"model": SongList},
    400: {"description": "Count is not an integer", "model": InvalidParameterResponse},
    **ERROR_RESPONSES,
}


async def rank_songs(
    mood: str,
    raw_count: Optional[str],
    build: Callable[[int], RemoteQuery],
    backend: QueryBackend,
) -> JSONResponse:
    # Raises InvalidParameterError before anything is dispatched
    count = parse_count(raw_count)
    outcome = await catalog.dispatch(backend, build(count))
    return build_response(
        outcome, f"No song matches found for the mood {mood} with the count parameter '{count}'"
    )


def _dancing(count: int) -> RemoteQuery:
    return catalog.top_songs_by("danceability", count)


def _happy(count: int) -> RemoteQuery:
    return catalog.top_songs_by("valence", count)


def _coffee(count: int) -> RemoteQuery:
    return catalog.top_songs_procedure("top_songs_coffee", count)


def _studying(count: int) -> RemoteQuery:
    return catalog.top_songs_procedure("top_songs_studying", count)


@router.get("/dancing", responses=MOOD_RESPONSES, summary="Top 20 songs by danceability")
async def dancing(backend: QueryBackend = Depends(get_backend)):
    return await rank_songs("dancing", None, _dancing, backend)


@router.get("/dancing/{ref}", responses=MOOD_RESPONSES, summary="Top N songs by danceability")
async def dancing_count(ref: str, backend: QueryBackend = Depends(get_backend)):
    return await rank_songs("dancing", ref, _dancing, backend)


@router.get("/happy", responses=MOOD_RESPONSES, summary="Top 20 songs by valence")
async def happy(backend: QueryBackend = Depends(get_backend)):
    return await rank_songs("happy", None, _happy, backend)


@router.get("/happy/{ref}", responses=MOOD_RESPONSES, summary="Top N songs by valence")
async def happy_count(ref: str, backend: QueryBackend = Depends(get_backend)):
    return await rank_songs("happy", ref, _happy, backend)


@router.get("/coffee", responses=MOOD_RESPONSES, summary="Top 20 songs by liveness/acousticness")
async def coffee(backend: QueryBackend = Depends(get_backend)):
    return await rank_songs("coffee", None, _coffee, backend)


@router.get("/coffee/{ref}", responses=MOOD_RESPONSES, summary="Top N songs by liveness/acousticness")
async def coffee_count(ref: str, backend: QueryBackend = Depends(get_backend)):
    return await rank_songs("coffee", ref, _coffee, backend)


@router.get("/studying", responses=MOOD_RESPONSES, summary="Top 20 songs by energy*speechiness")
async def studying(backend: QueryBackend = Depends(get_backend)):
    return await rank_songs("studying", None, _studying, backend)


@router.get("/studying/{ref}", responses=MOOD_RESPONSES, summary="Top N songs by energy*speechiness")
async def studying_count(ref: str, backend: QueryBackend = Depends(get_backend)):
    return await rank_songs("studying", ref, _studying, backend)
