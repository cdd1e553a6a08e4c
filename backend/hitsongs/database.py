"""
Hit Songs API — Query Backend Lifecycle
========================================

What:  Creates, injects and disposes the process-wide QueryBackend handle.
Why:   The remote client is created once at startup and never mutated.
       It lives on `app.state` and reaches routes through FastAPI's
       dependency injection, so tests hand in a fake without patching imports.
How:   `connect_backend()` runs in the lifespan, `get_backend()` is the route
       dependency, `dispose_backend()` runs on shutdown.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request

from hitsongs.config import Settings
from hitsongs.exceptions import RemoteQueryError
from hitsongs.services.query_base import QueryBackend
from hitsongs.services.supabase_backend import SupabaseBackend

logger = logging.getLogger(__name__)


async def connect_backend(app: FastAPI, config: Settings) -> Optional[QueryBackend]:
    """
    Attach a SupabaseBackend to `app` unless one was injected already.

    Returns the backend created here (the caller owns it and must dispose
    it), or None when nothing was created.
    """
    if getattr(app.state, "backend", None) is not None:
        logger.info("Using injected query backend: %s", type(app.state.backend).__name__)
        return None

    if not config.is_configured:
        logger.error("Supabase is not configured; query routes will answer 503.")
        return None

    backend = await SupabaseBackend.connect(config.supabase_url, config.supabase_anon_key)
    app.state.backend = backend
    return backend


async def dispose_backend(app: FastAPI, backend: Optional[QueryBackend]) -> None:
    if backend is None:
        return
    await backend.close()
    if getattr(app.state, "backend", None) is backend:
        app.state.backend = None


def get_backend(request: Request) -> QueryBackend:
    """
    FastAPI dependency returning the shared QueryBackend.

    Raises:
        RemoteQueryError: (503) no backend is available, e.g. missing credentials.
    """
    backend = getattr(request.app.state, "backend", None)
    if backend is None:
        raise RemoteQueryError(
            message="The remote query service is not configured",
            status=503,
        )
    return backend
