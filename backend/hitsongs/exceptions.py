"""
Hit Songs API — Custom Exception Hierarchy
===========================================

What:  Defines application-specific exceptions for the request pipeline.
Why:   Each failure mode maps to exactly one HTTP status and one response body,
       so route handlers never build error responses by hand.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) and the response
       normalizer turn these into JSON responses.
Who:   Raised by the parameter validator, the query backend and the normalizer.

Exception Hierarchy:
    HitSongsError (base)
    ├── InvalidParameterError    → 400 Bad Request (no remote call issued)
    ├── NotFoundError            → 404 Not Found (query matched zero rows)
    └── RemoteQueryError         → remote-reported status, or 500
"""

from http import HTTPStatus
from typing import Any, Dict, Optional


class HitSongsError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidParameterError(HitSongsError):
    """
    Raised when a numeric path parameter cannot be parsed.

    HTTP:    400 Bad Request
    When:    GET /api/mood/coffee/abc (the count is not an integer).

    Raised before the query is dispatched, so a rejected request never
    reaches the remote service.
    """

    def __init__(
        self,
        parameter: str,
        value: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"Parameter '{parameter}' must be an integer, got '{value}'"
        ctx = context or {}
        ctx["parameter"] = parameter
        ctx["value"] = value
        super().__init__(message=message, context=ctx)
        self.parameter = parameter
        self.value = value


class NotFoundError(HitSongsError):
    """
    Raised when a well-formed query succeeded but matched no rows.

    HTTP:    404 Not Found
    """

    def __init__(
        self,
        message: str = "The requested resource was not found",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RemoteQueryError(HitSongsError):
    """
    Raised when the remote query service reports an error or cannot be reached.

    HTTP:    `status` as reported by the remote service, 500 when unknown.

    The message is surfaced verbatim to the client. details, hint and code
    are PostgREST diagnostics: they are logged server-side only because they
    can reveal schema names.
    """

    def __init__(
        self,
        message: str = "Remote query failed",
        details: Optional[str] = None,
        hint: Optional[str] = None,
        code: Optional[str] = None,
        status: Optional[int] = None,
        status_text: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.details = details
        self.hint = hint
        self.code = code
        self.status = status
        if status_text is None and status is not None:
            try:
                status_text = HTTPStatus(status).phrase
            except ValueError:
                status_text = None
        self.status_text = status_text

    @property
    def http_status(self) -> int:
        """Status to answer with: the remote one when it is a valid error status."""
        if self.status is not None and 400 <= self.status <= 599:
            return self.status
        return 500

    def diagnostics(self) -> Dict[str, Any]:
        """Full structured record for the operational log."""
        return {
            "message": self.message,
            "details": self.details,
            "hint": self.hint,
            "code": self.code,
            "status": self.status,
            "status_text": self.status_text,
        }
