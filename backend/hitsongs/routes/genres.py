"""
Hit Songs API — Genre Route Handlers
=====================================

What:  GET /api/genres (every genre, remote order).
"""

from typing import List

from fastapi import APIRouter, Depends

from hitsongs.database import get_backend
from hitsongs.responses import build_response
from hitsongs.schemas.catalog import ERROR_RESPONSES, Genre
from hitsongs.services import catalog
from hitsongs.services.query_base import QueryBackend

router = APIRouter(prefix="/api", tags=["Genres"])


@router.get(
    "/genres",
    responses={200: {"model": List[Genre]}, **ERROR_RESPONSES},
    summary="List all genres",
)
async def list_genres(backend: QueryBackend = Depends(get_backend)):
    outcome = await catalog.dispatch(backend, catalog.all_genres())
    return build_response(outcome, "No genres found")
