"""
Hit Songs API — Song Route Handlers
====================================

What:  Listing, sorting, lookup and title/year search over the songs relation.
How:   Every song row embeds its artist and genre (inner join), so a song
       whose artist or genre row is missing never appears in a result.

Sort fields for /api/songs/sort/{order}:
    id      → song_id
    artist  → artist(artist_name)   (embedded artist's name)
    genre   → genre(genre_name)     (embedded genre's name)
    other   → used as the column name; Supabase rejects unknown columns
"""

from fastapi import APIRouter, Depends

from hitsongs.database import get_backend
from hitsongs.responses import build_response
from hitsongs.schemas.catalog import ERROR_RESPONSES, SongList
from hitsongs.services import catalog
from hitsongs.services.query_base import QueryBackend

router = APIRouter(prefix="/api", tags=["Songs"])

SONG_RESPONSES = {200: {"model": SongList}, **ERROR_RESPONSES}


@router.get("/songs", responses=SONG_RESPONSES, summary="List all songs sorted by title")
async def list_songs(backend: QueryBackend = Depends(get_backend)):
    outcome = await catalog.dispatch(backend, catalog.all_songs())
    return build_response(outcome, "No songs found")


@router.get(
    "/songs/sort/{order}",
    responses=SONG_RESPONSES,
    summary="List all songs sorted by a field",
    description="Valid fields include id, title, artist, genre, year and duration.",
)
async def list_songs_sorted(order: str, backend: QueryBackend = Depends(get_backend)):
    outcome = await catalog.dispatch(backend, catalog.songs_sorted_by(order))
    return build_response(outcome, f"No songs found when sorting by the order parameter '{order}'")


@router.get("/songs/{ref}", responses=SONG_RESPONSES, summary="Get a single song by song_id")
async def get_song(ref: str, backend: QueryBackend = Depends(get_backend)):
    outcome = await catalog.dispatch(backend, catalog.song_by_id(ref))
    return build_response(
        outcome, f"No song match found: the song_id parameter '{ref}' did not return any data"
    )


@router.get(
    "/songs/search/begin/{substring}",
    responses=SONG_RESPONSES,
    summary="Songs whose title begins with a substring (case-insensitive)",
)
async def search_title_begins(substring: str, backend: QueryBackend = Depends(get_backend)):
    outcome = await catalog.dispatch(backend, catalog.songs_title_begins_with(substring))
    return build_response(
        outcome, f"No song matches found beginning with the substring parameter '{substring}'"
    )


@router.get(
    "/songs/search/any/{substring}",
    responses=SONG_RESPONSES,
    summary="Songs whose title contains a substring (case-insensitive)",
)
async def search_title_contains(substring: str, backend: QueryBackend = Depends(get_backend)):
    outcome = await catalog.dispatch(backend, catalog.songs_title_contains(substring))
    return build_response(
        outcome, f"No song matches found containing the substring parameter '{substring}'"
    )


@router.get(
    "/songs/search/year/{substring}",
    responses=SONG_RESPONSES,
    summary="Songs released in a given year",
)
async def search_year(substring: str, backend: QueryBackend = Depends(get_backend)):
    outcome = await catalog.dispatch(backend, catalog.songs_by_year(substring))
    return build_response(
        outcome, f"No song matches found whose year is equal to the year parameter '{substring}'"
    )


@router.get("/songs/artist/{ref}", responses=SONG_RESPONSES, summary="Songs by one artist")
async def list_songs_by_artist(ref: str, backend: QueryBackend = Depends(get_backend)):
    outcome = await catalog.dispatch(backend, catalog.songs_by_artist(ref))
    return build_response(outcome, f"No song matches found for the artist_id parameter '{ref}'")


@router.get("/songs/genre/{ref}", responses=SONG_RESPONSES, summary="Songs in one genre")
async def list_songs_by_genre(ref: str, backend: QueryBackend = Depends(get_backend)):
    outcome = await catalog.dispatch(backend, catalog.songs_by_genre(ref))
    return build_response(outcome, f"No song matches found for the genre_id parameter '{ref}'")
