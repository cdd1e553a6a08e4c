"""
Hit Songs API — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn hitsongs.main:app) and by the test suite.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐             │
    │  │ Context  │→│ Logging  │→│ GZip │→│ CORS │             │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘             │
    │                                                          │
    │  Routes: /api/artists /api/genres /api/songs             │
    │          /api/playlists /api/mood /health                │
    │                                                          │
    │  Exception Handlers:                                     │
    │  InvalidParameter→400 │ NotFound→404 │ Remote→status/500 │
    │  unmatched route→404 text │ anything else→500            │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → settings validation → Supabase client
    Shutdown: close the Supabase client's HTTP session
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hitsongs import __version__
from hitsongs.config import settings
from hitsongs.database import connect_backend, dispose_backend
from hitsongs.exceptions import (
    HitSongsError,
    InvalidParameterError,
    NotFoundError,
    RemoteQueryError,
)
from hitsongs.middleware.logging import RequestLoggingMiddleware
from hitsongs.middleware.request_context import RequestContextMiddleware, request_id_var
from hitsongs.responses import (
    INVALID_PARAMETER_LABEL,
    not_found_response,
    remote_error_response,
)
from hitsongs.routes import artists, genres, health, mood, playlists, songs
from hitsongs.services.query_base import QueryBackend

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND_MESSAGE = "404 Not Found: Unable to find the requested resource."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # httpx logs every Supabase request at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Validate Supabase settings (log, don't exit: /health stays up)
        3. Create the Supabase backend unless one was injected
    Shutdown:
        Close the backend created at startup
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Hit Songs API %s starting up...", __version__)

    try:
        settings.validate_required()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    owned_backend = await connect_backend(app, settings)

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    logger.info("Hit Songs API shutting down...")
    await dispose_backend(app, owned_backend)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        InvalidParameterError   → 400 {"Error (Invalid Parameter)": ...}
        NotFoundError           → 404 {"Error (Not Found)": ...}
        RemoteQueryError        → remote status or 500 {"Error (Supabase)": ...}
        HitSongsError (base)    → 500
        HTTPException 404/405   → 404 plain text (unmatched route)
        Exception (fallback)    → 500, stack trace logged
    """

    @app.exception_handler(InvalidParameterError)
    async def handle_invalid_parameter(request: Request, exc: InvalidParameterError):
        logger.warning("[%s] Invalid parameter: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=400, content={INVALID_PARAMETER_LABEL: exc.message})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return not_found_response(exc)

    @app.exception_handler(RemoteQueryError)
    async def handle_remote_query_error(request: Request, exc: RemoteQueryError):
        return remote_error_response(exc)

    @app.exception_handler(HitSongsError)
    async def handle_app_error(request: Request, exc: HitSongsError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={"error": "server_error", "message": exc.message, "request_id": rid},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # Only GET routes exist; any other method on a known path is "not found" too
        if exc.status_code in (404, 405):
            return PlainTextResponse(ROUTE_NOT_FOUND_MESSAGE, status_code=404)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(backend: Optional[QueryBackend] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        backend: QueryBackend to serve from. When None, the lifespan connects
                 to Supabase using `settings`. Tests pass a fake here.
    """
    app = FastAPI(
        title="Hit Songs API",
        description=(
            "Read-only JSON API over the Spotify hit songs (2016-2019) dataset: "
            "songs, artists, genres, playlists and mood rankings."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.backend = backend

    # Middleware executes in REVERSE order of addition:
    # RequestContext → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Remote-Calls"],
    )
    # Full song listings are a few hundred KB of JSON
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)

    app.include_router(artists.router)
    app.include_router(genres.router)
    app.include_router(songs.router)
    app.include_router(playlists.router)
    app.include_router(mood.router)
    app.include_router(health.router)

    return app


# uvicorn expects `hitsongs.main:app` to be importable
app = create_app()
