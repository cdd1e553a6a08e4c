"""
Hit Songs API — Response Normalizer
====================================

What:  The single decision procedure turning a QueryOutcome into an HTTP response.
Why:   Every query-backed route answers the same way; keeping the branch in
       one place keeps status codes and body shapes identical across routes.

Decision (first match wins):
    1. remote error     → remote status (or 500), {"Error (Supabase)": message}
                          + ERROR log record with the full diagnostics
    2. zero rows        → 404, {"Error (Not Found)": <parameter-specific message>}
    3. one or more rows → 200, JSON array of the rows in remote order
"""

import logging

from fastapi.responses import JSONResponse

from hitsongs.exceptions import NotFoundError, RemoteQueryError
from hitsongs.middleware.request_context import request_id_var
from hitsongs.services.catalog import QueryOutcome

logger = logging.getLogger(__name__)

REMOTE_ERROR_LABEL = "Error (Supabase)"
NOT_FOUND_LABEL = "Error (Not Found)"
INVALID_PARAMETER_LABEL = "Error (Invalid Parameter)"


def remote_error_response(error: RemoteQueryError) -> JSONResponse:
    """
    Log the full diagnostics and answer with the remote message only.

    details, hint and code stay in the log: they can reveal schema names.
    """
    logger.error(
        "[%s] Remote query error: %s",
        request_id_var.get(""),
        error.diagnostics(),
        extra={"remote_error": error.diagnostics()},
    )
    return JSONResponse(
        status_code=error.http_status,
        content={REMOTE_ERROR_LABEL: error.message},
    )


def not_found_response(error: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={NOT_FOUND_LABEL: error.message})


def build_response(outcome: QueryOutcome, not_found_message: str) -> JSONResponse:
    """
    Map a dispatch outcome to the HTTP response.

    Args:
        outcome: Rows or remote error from `catalog.dispatch()`.
        not_found_message: Body text for the empty-result case; routes
            interpolate the filtering parameter into it.
    """
    if outcome.error is not None:
        return remote_error_response(outcome.error)

    if not outcome.rows:
        return not_found_response(NotFoundError(message=not_found_message))

    return JSONResponse(status_code=200, content=outcome.rows)
