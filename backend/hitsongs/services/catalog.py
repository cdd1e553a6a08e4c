"""
Hit Songs API — Query Dispatcher
=================================

What:  Maps every route's intent onto a remote operation and executes it.
Why:   The routes share four projections and a handful of filter patterns;
       building them here keeps each route down to one line of intent.
How:   Pure builder functions return Selection / ProcedureCall value objects;
       `dispatch()` sends exactly one of them to the QueryBackend and wraps
       the result (rows or RemoteQueryError) in a QueryOutcome.

Remote operation shapes:
    Selection     songs / artists / genres / playlists (+ embedded relations)
    Aggregate     Selection over songs with avg() projections (artist averages)
    ProcedureCall top_songs_coffee, top_songs_studying (expression sort keys)
"""

import logging
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from hitsongs.exceptions import RemoteQueryError
from hitsongs.middleware.request_context import record_remote_call
from hitsongs.services.query_base import (
    Filter,
    Ordering,
    ProcedureCall,
    QueryBackend,
    RemoteQuery,
    Row,
    Selection,
)

logger = logging.getLogger(__name__)


# ── Projections ───────────────────────────────────────────────────────────

# Audio-feature columns of the songs relation, in dataset order
FEATURE_COLUMNS = (
    "bpm",
    "energy",
    "danceability",
    "loudness",
    "liveness",
    "valence",
    "duration",
    "acousticness",
    "speechiness",
    "popularity",
)

# "!inner" drops songs whose artist or genre row is missing
SONG_COLUMNS = (
    "song_id",
    "title",
    "artist:artists!inner(artist_id,artist_name)",
    "genre:genres!inner(genre_id,genre_name)",
    "year",
) + FEATURE_COLUMNS

ARTIST_COLUMNS = (
    "artist_id",
    "artist_name",
    "types(type_name)",
    "artist_image_url",
    "spotify_url",
    "spotify_desc",
)

ARTIST_AVERAGE_COLUMNS = tuple(f"avg_{col}:{col}.avg()" for col in FEATURE_COLUMNS)

# The spread operator ("...") lifts the embedded columns into each playlist row
PLAYLIST_COLUMNS = (
    "playlist_id",
    "...songs!inner(song_id,title,year,...artists!inner(artist_name),...genres!inner(genre_name))",
)


# ── Sort-field remapping ──────────────────────────────────────────────────

SORT_FIELD_COLUMNS = {
    "id": "song_id",
    "artist": "artist(artist_name)",
    "genre": "genre(genre_name)",
}


def remap_sort_field(field_name: str) -> str:
    """
    Translate a logical sort field into a relation-qualified column.

    Unknown names pass through unchanged; the remote service rejects
    columns that do not exist.
    """
    return SORT_FIELD_COLUMNS.get(field_name, field_name)


# ── Query builders ────────────────────────────────────────────────────────

def _songs(**kwargs) -> Selection:
    return Selection(relation="songs", columns=SONG_COLUMNS, **kwargs)


def _equals(column: str, value: str) -> Tuple[Filter, ...]:
    return (Filter(column=column, value=value),)


def _title_like(pattern: str) -> Tuple[Filter, ...]:
    return (Filter(column="title", value=pattern, op="ilike"),)


def all_artists() -> Selection:
    return Selection(
        relation="artists", columns=ARTIST_COLUMNS, order=Ordering(column="artist_name")
    )


def artist_by_id(ref: str) -> Selection:
    return Selection(relation="artists", columns=ARTIST_COLUMNS, filters=_equals("artist_id", ref))


def artist_averages(ref: str) -> Selection:
    return Selection(
        relation="songs", columns=ARTIST_AVERAGE_COLUMNS, filters=_equals("artist_id", ref)
    )


def all_genres() -> Selection:
    return Selection(relation="genres")


def all_songs() -> Selection:
    return _songs(order=Ordering(column="title"))


def songs_sorted_by(field_name: str) -> Selection:
    return _songs(order=Ordering(column=remap_sort_field(field_name)))


def song_by_id(ref: str) -> Selection:
    return _songs(filters=_equals("song_id", ref))


def songs_title_begins_with(prefix: str) -> Selection:
    return _songs(filters=_title_like(f"{prefix}%"))


def songs_title_contains(substring: str) -> Selection:
    return _songs(filters=_title_like(f"%{substring}%"))


def songs_by_year(year: str) -> Selection:
    return _songs(filters=_equals("year", year))


def songs_by_artist(ref: str) -> Selection:
    return _songs(filters=_equals("artist_id", ref))


def songs_by_genre(ref: str) -> Selection:
    return _songs(filters=_equals("genre_id", ref))


def playlist_songs(ref: str) -> Selection:
    return Selection(
        relation="playlists", columns=PLAYLIST_COLUMNS, filters=_equals("playlist_id", ref)
    )


def top_songs_by(column: str, count: int) -> Selection:
    """Highest `count` songs by a single feature column, descending."""
    return _songs(order=Ordering(column=column, descending=True), limit=count)


def top_songs_procedure(name: str, count: int) -> ProcedureCall:
    """Ranking that needs an expression sort key, evaluated by a stored function."""
    return ProcedureCall(name=name, params={"limit_count": count})


# ── Dispatch ──────────────────────────────────────────────────────────────

class QueryOutcome(BaseModel):
    """Result of one remote call: rows on success, `error` on failure."""

    rows: List[Row] = Field(default_factory=list)
    error: Optional[RemoteQueryError] = None

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def ok(self) -> bool:
        return self.error is None


def _outcome_label(outcome: QueryOutcome) -> str:
    if outcome.error is not None:
        return f"error:{outcome.error.code or outcome.error.http_status}"
    return "rows" if outcome.rows else "empty"


async def dispatch(backend: QueryBackend, query: RemoteQuery) -> QueryOutcome:
    """
    Execute `query` against `backend` exactly once.

    Remote failures are captured in the outcome instead of propagating, so
    the response normalizer sees every result through the same three-way
    decision. Nothing is retried.
    """
    try:
        if isinstance(query, ProcedureCall):
            rows = await backend.call(query)
        else:
            rows = await backend.select(query)
    except RemoteQueryError as e:
        outcome = QueryOutcome(error=e)
    else:
        outcome = QueryOutcome(rows=rows)

    label = _outcome_label(outcome)
    logger.debug("%s dispatched: %s", type(query).__name__, label)
    record_remote_call(label)
    return outcome


def drop_empty_aggregate(outcome: QueryOutcome) -> QueryOutcome:
    """
    Treat an ungrouped aggregate over zero rows as "no match".

    PostgREST answers `avg()` without grouping with exactly one row, whose
    values are all null when the filter matched nothing.
    """
    if outcome.ok and len(outcome.rows) == 1:
        if all(value is None for value in outcome.rows[0].values()):
            return QueryOutcome(rows=[])
    return outcome
