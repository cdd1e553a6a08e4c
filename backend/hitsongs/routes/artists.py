"""
Hit Songs API — Artist Route Handlers
======================================

What:  GET /api/artists, /api/artists/{ref}, /api/artists/averages/{ref}.
"""

from typing import List

from fastapi import APIRouter, Depends

from hitsongs.database import get_backend
from hitsongs.responses import build_response
from hitsongs.schemas.catalog import ERROR_RESPONSES, Artist, ArtistAverages
from hitsongs.services import catalog
from hitsongs.services.query_base import QueryBackend

router = APIRouter(prefix="/api", tags=["Artists"])


@router.get(
    "/artists",
    responses={200: {"model": List[Artist]}, **ERROR_RESPONSES},
    summary="List all artists sorted by name",
)
async def list_artists(backend: QueryBackend = Depends(get_backend)):
    outcome = await catalog.dispatch(backend, catalog.all_artists())
    return build_response(outcome, "No artists found")


@router.get(
    "/artists/averages/{ref}",
    responses={200: {"model": List[ArtistAverages]}, **ERROR_RESPONSES},
    summary="Average audio features across one artist's songs",
)
async def get_artist_averages(ref: str, backend: QueryBackend = Depends(get_backend)):
    outcome = await catalog.dispatch(backend, catalog.artist_averages(ref))
    return build_response(
        catalog.drop_empty_aggregate(outcome),
        f"No artist match found for the artist_id parameter '{ref}'",
    )


@router.get(
    "/artists/{ref}",
    responses={200: {"model": List[Artist]}, **ERROR_RESPONSES},
    summary="Get a single artist by artist_id",
)
async def get_artist(ref: str, backend: QueryBackend = Depends(get_backend)):
    outcome = await catalog.dispatch(backend, catalog.artist_by_id(ref))
    return build_response(
        outcome, f"No artist match found for the artist_id parameter '{ref}'"
    )
