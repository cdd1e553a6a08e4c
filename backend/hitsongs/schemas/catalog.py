"""
Hit Songs API — Pydantic Response Schemas
==========================================

What:  Pydantic models describing the JSON the API returns.
Why:   FastAPI turns them into the OpenAPI document served at /docs.
How:   Routes pass remote rows through untouched (JSONResponse), so these
       models document the payload; they never filter or coerce it.
       `extra="allow"` keeps them honest if the remote projection grows.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ArtistRef(BaseModel):
    """Embedded artist on a song row (inner join on artist_id)."""
    artist_id: int
    artist_name: str


class GenreRef(BaseModel):
    """Embedded genre on a song row (inner join on genre_id)."""
    genre_id: int
    genre_name: str


class Song(BaseModel):
    model_config = ConfigDict(extra="allow")

    song_id: int
    title: str
    artist: ArtistRef
    genre: GenreRef
    year: int
    bpm: Optional[float] = None
    energy: Optional[float] = None
    danceability: Optional[float] = None
    loudness: Optional[float] = None
    liveness: Optional[float] = None
    valence: Optional[float] = None
    duration: Optional[float] = None
    acousticness: Optional[float] = None
    speechiness: Optional[float] = None
    popularity: Optional[float] = None


class ArtistType(BaseModel):
    type_name: str


class Artist(BaseModel):
    model_config = ConfigDict(extra="allow")

    artist_id: int
    artist_name: str
    types: Optional[ArtistType] = None
    artist_image_url: Optional[str] = None
    spotify_url: Optional[str] = None
    spotify_desc: Optional[str] = None


class ArtistAverages(BaseModel):
    """Averages of every audio feature over one artist's songs."""
    model_config = ConfigDict(extra="allow")

    avg_bpm: Optional[float] = None
    avg_energy: Optional[float] = None
    avg_danceability: Optional[float] = None
    avg_loudness: Optional[float] = None
    avg_liveness: Optional[float] = None
    avg_valence: Optional[float] = None
    avg_duration: Optional[float] = None
    avg_acousticness: Optional[float] = None
    avg_speechiness: Optional[float] = None
    avg_popularity: Optional[float] = None


class Genre(BaseModel):
    model_config = ConfigDict(extra="allow")

    genre_id: int
    genre_name: str


class PlaylistSong(BaseModel):
    """One playlist member, with artist and genre names spread into the row."""
    model_config = ConfigDict(extra="allow")

    playlist_id: int
    song_id: int
    title: str
    year: int
    artist_name: str
    genre_name: str


# ══════════════════════════════════════════════════════════════════════════
# Error and health models
# ══════════════════════════════════════════════════════════════════════════

class RemoteErrorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: str = Field(alias="Error (Supabase)", description="Message reported by Supabase")


class NotFoundResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: str = Field(
        alias="Error (Not Found)",
        description="Names the path parameter that matched no rows",
    )


class InvalidParameterResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: str = Field(alias="Error (Invalid Parameter)")


class HealthResponse(BaseModel):
    """
    What:  Health check response for monitoring systems.
    Why:   `status` is "degraded" (never an error status) when Supabase is
           unreachable, so the process is not restarted for a remote outage.
    """
    status: str = Field(description="Overall status: healthy or degraded")
    version: str = Field(description="API version")
    database: str = Field(description="Supabase status: connected, unavailable, unconfigured")
    uptime_seconds: float = Field(description="Seconds since the service started")


ERROR_RESPONSES = {
    404: {"description": "No rows matched the parameter", "model": NotFoundResponse},
    500: {"description": "Supabase reported an error", "model": RemoteErrorResponse},
}

SongList = List[Song]
