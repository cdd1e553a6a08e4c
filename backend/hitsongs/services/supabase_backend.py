"""
Hit Songs API — Supabase Query Backend
=======================================

What:  Concrete QueryBackend built on the async `supabase` client (PostgREST).
Why:   The dataset lives in a hosted Supabase project; PostgREST already
       offers filtering, ordering, embedding and aggregates over HTTP.
How:   Translates Selection / ProcedureCall value objects into query-builder
       chains, awaits exactly one request, and converts every failure into
       RemoteQueryError.
Who:   Created once in the application lifespan; shared by all requests.

One request per query:
    postgrest-py retries GET requests answered with 503/520, sleeping
    between attempts. Every builder is sent with `.retry(False)`.

Error translation:
    postgrest APIError  → RemoteQueryError(message, details, hint, code, status)
    httpx.HTTPError     → RemoteQueryError(status = None → answered as 500)

    PostgREST error bodies do not carry the HTTP status, so it is recovered
    from the error code using PostgREST's error-code table. When the body was
    not JSON (a gateway error page), postgrest-py puts the HTTP status itself
    in `code`.
"""

import logging
import re
from typing import Dict, List, Optional, Union

import httpx
from postgrest import AsyncPostgrestClient
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from hitsongs.exceptions import RemoteQueryError
from hitsongs.services.query_base import (
    ProcedureCall,
    QueryBackend,
    Row,
    Selection,
)

logger = logging.getLogger(__name__)


# PostgREST / PostgreSQL error code → HTTP status, from PostgREST's error reference
_STATUS_BY_CODE: Dict[str, int] = {
    # Group 0: connection to the database
    "PGRST000": 503,
    "PGRST001": 503,
    "PGRST002": 503,
    "PGRST003": 504,
    # Group 1: API request
    "PGRST100": 400,
    "PGRST101": 405,
    "PGRST102": 400,
    "PGRST103": 416,
    "PGRST105": 405,
    "PGRST106": 406,
    "PGRST107": 415,
    "PGRST108": 400,
    "PGRST111": 500,
    "PGRST112": 500,
    "PGRST114": 400,
    "PGRST115": 400,
    "PGRST116": 406,
    "PGRST117": 405,
    "PGRST118": 400,
    "PGRST120": 400,
    "PGRST121": 500,
    "PGRST122": 400,
    "PGRST123": 400,
    "PGRST124": 400,
    "PGRST125": 404,
    "PGRST126": 404,
    "PGRST127": 400,
    "PGRST128": 400,
    # Group 2: schema cache
    "PGRST200": 400,
    "PGRST201": 300,
    "PGRST202": 404,
    "PGRST203": 300,
    "PGRST204": 400,
    "PGRST205": 404,
    # Group 3: JWT
    "PGRST300": 500,
    "PGRST301": 401,
    "PGRST302": 401,
    "PGRST303": 401,
    "PGRSTX00": 500,
    # PostgreSQL SQLSTATEs with their own status
    "23503": 409,
    "23505": 409,
    "25006": 405,
    "40001": 409,
    "42501": 401,  # anon role: unauthenticated
    "42883": 404,
    "42P01": 404,
    "42P17": 500,
    "53400": 500,
    "P0001": 400,
}

# PostgreSQL SQLSTATE class (first two characters) → HTTP status
_STATUS_BY_CLASS: Dict[str, int] = {
    "08": 503,
    "09": 500,
    "0L": 403,
    "0P": 403,
    "22": 400,
    "23": 400,
    "25": 500,
    "28": 403,
    "2D": 500,
    "38": 500,
    "39": 500,
    "3B": 500,
    "40": 500,
    "42": 400,
    "53": 503,
    "54": 500,
    "55": 500,
    "57": 500,
    "58": 500,
    "F0": 500,
    "HV": 500,
    "P0": 500,
    "XX": 500,
}

# "502" (postgrest-py's non-JSON fallback) or "PT402" (status set via RAISE)
_EXPLICIT_STATUS_PATTERN = re.compile(r"(?:PT)?([1-5][0-9]{2})", re.ASCII)


def status_for_code(code: Union[str, int, None]) -> Optional[int]:
    """HTTP status PostgREST answers with for `code`, None when unknown."""
    if code is None or code == "":
        return None
    if isinstance(code, int):
        return code

    code = str(code)
    explicit = _EXPLICIT_STATUS_PATTERN.fullmatch(code)
    if explicit:
        return int(explicit.group(1))
    if code in _STATUS_BY_CODE:
        return _STATUS_BY_CODE[code]
    return _STATUS_BY_CLASS.get(code[:2])


def translate_api_error(exc: APIError) -> RemoteQueryError:
    code = exc.code
    return RemoteQueryError(
        message=exc.message or "Remote query failed",
        details=exc.details,
        hint=exc.hint,
        code=None if code is None else str(code),
        status=status_for_code(code),
    )


def translate_transport_error(exc: httpx.HTTPError) -> RemoteQueryError:
    return RemoteQueryError(
        message=f"Could not reach the remote query service: {exc}",
        details=type(exc).__name__,
    )


class SupabaseBackend(QueryBackend):
    """
    QueryBackend over a supabase AsyncClient.

    Any client exposing `table()` and `rpc()` works: the supabase client in
    production (`SupabaseBackend.connect()`), a bare AsyncPostgrestClient
    pointed at a stub transport, or a mocked builder chain in tests.
    """

    def __init__(self, client: Union[AsyncClient, AsyncPostgrestClient]):
        self._client = client

    @classmethod
    async def connect(cls, url: str, key: str) -> "SupabaseBackend":
        client = await acreate_client(url, key)
        logger.info("Supabase client created for %s", url)
        return cls(client)

    async def select(self, selection: Selection) -> List[Row]:
        query = self._client.table(selection.relation).select(*selection.columns)

        for flt in selection.filters:
            if flt.op == "ilike":
                query = query.ilike(flt.column, flt.value)
            else:
                query = query.eq(flt.column, flt.value)

        if selection.order is not None:
            query = query.order(selection.order.column, desc=selection.order.descending)

        if selection.limit is not None:
            query = query.limit(selection.limit)

        logger.debug("select %s %s", selection.relation, selection.filters)
        return await self._execute(query)

    async def call(self, procedure: ProcedureCall) -> List[Row]:
        logger.debug("rpc %s(%s)", procedure.name, procedure.params)
        return await self._execute(self._client.rpc(procedure.name, procedure.params))

    async def health_check(self) -> bool:
        try:
            await self.select(Selection(relation="genres", columns=("genre_id",), limit=1))
        except RemoteQueryError as e:
            logger.warning("Supabase health check failed: %s", e.message)
            return False
        return True

    async def close(self) -> None:
        if isinstance(self._client, AsyncPostgrestClient):
            await self._client.aclose()
        else:
            await self._client.postgrest.aclose()
        logger.info("Supabase client closed")

    async def _execute(self, builder) -> List[Row]:
        try:
            response = await builder.retry(False).execute()
        except APIError as e:
            raise translate_api_error(e) from e
        except httpx.HTTPError as e:
            raise translate_transport_error(e) from e
        return list(response.data or [])
