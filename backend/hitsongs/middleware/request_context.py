"""
Hit Songs API — Request Context Middleware
===========================================

What:  Per-request correlation ID plus a trace of the remote queries the
       request caused.
Why:   Remote-error diagnostics are logged server-side only; the
       X-Request-ID header lets a client point at the matching log lines,
       and X-Remote-Calls makes the one-query-per-request rule observable.
How:   Both values live in ContextVars set before the route runs. The trace
       is a mutable object, so the dispatcher's updates are visible here
       after the handler returns.

Response headers:
    X-Request-ID     client-sent ID when well formed, otherwise a fresh one
    X-Remote-Calls   0 for rejected parameters and unknown routes, else 1
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# The ID is interpolated into log lines, so only plain tokens are echoed
_CLIENT_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}", re.ASCII)

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RemoteCallTrace:
    """Remote queries issued while serving one request."""

    def __init__(self) -> None:
        self.calls = 0
        self.outcome = "none"

    def record(self, outcome: str) -> None:
        self.calls += 1
        self.outcome = outcome


remote_trace_var: ContextVar[Optional[RemoteCallTrace]] = ContextVar(
    "remote_trace", default=None
)


def record_remote_call(outcome: str) -> None:
    """Count one remote query for the current request (no-op outside a request)."""
    trace = remote_trace_var.get()
    if trace is not None:
        trace.record(outcome)


def resolve_request_id(header_value: Optional[str]) -> str:
    if header_value and _CLIENT_ID_PATTERN.fullmatch(header_value):
        return header_value
    return uuid.uuid4().hex[:8]


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tags each request with an ID and a remote-call trace."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get("X-Request-ID"))
        trace = RemoteCallTrace()

        request_id_var.set(rid)
        remote_trace_var.set(trace)
        request.state.request_id = rid
        request.state.remote_trace = trace

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        response.headers["X-Remote-Calls"] = str(trace.calls)
        return response
