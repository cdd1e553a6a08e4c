"""
Hit Songs API — Playlist Route Handlers
========================================

What:  GET /api/playlists/{ref}: the songs of one playlist, each row
       carrying the artist and genre names.
"""

from typing import List

from fastapi import APIRouter, Depends

from hitsongs.database import get_backend
from hitsongs.responses import build_response
from hitsongs.schemas.catalog import ERROR_RESPONSES, PlaylistSong
from hitsongs.services import catalog
from hitsongs.services.query_base import QueryBackend

router = APIRouter(prefix="/api", tags=["Playlists"])


@router.get(
    "/playlists/{ref}",
    responses={200: {"model": List[PlaylistSong]}, **ERROR_RESPONSES},
    summary="List the songs of a playlist",
)
async def get_playlist(ref: str, backend: QueryBackend = Depends(get_backend)):
    outcome = await catalog.dispatch(backend, catalog.playlist_songs(ref))
    return build_response(
        outcome, f"No playlist match found for the playlist_id parameter '{ref}'"
    )
