"""
Hit Songs API — Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request Context] → [Access Log] → [GZip] → [CORS] → Route Handler

    1. Request Context: correlation ID and remote-call trace, echoed as
       X-Request-ID / X-Remote-Calls
    2. Access Log: one line per request with route, status, duration and
       the remote-call summary
"""
