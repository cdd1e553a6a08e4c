"""
Hit Songs API — Access Log Middleware
======================================

What:  One access-log line per HTTP request on the `hitsongs.access` logger.
How:   Runs inside RequestContextMiddleware, so the request ID and the
       remote-call trace are already set when the handler returns.

Line format:
    GET /api/songs/5 404 12.3ms route=/api/songs/{ref} remote=1:empty [a1b2c3d4]

    route   matched route template, "-" when no route matched
    remote  remote queries issued : last outcome (rows, empty, error code)

Level by status class:
    5xx → ERROR    (remote service failing)
    4xx → WARNING  (bad count, unknown id, unknown route)
    else → INFO
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from hitsongs.middleware.request_context import remote_trace_var, request_id_var

logger = logging.getLogger("hitsongs.access")

# Polled by orchestrators; never dispatched to the catalog
SILENT_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", "-")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SILENT_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        trace = remote_trace_var.get()
        calls = trace.calls if trace is not None else 0
        outcome = trace.outcome if trace is not None else "none"
        route = route_template(request)
        rid = request_id_var.get("")

        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms route=%s remote=%d:%s [%s]",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            route,
            calls,
            outcome,
            rid,
            extra={
                "request_id": rid,
                "route": route,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "remote_calls": calls,
                "remote_outcome": outcome,
            },
        )
        return response
