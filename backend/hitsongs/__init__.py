"""
Hit Songs API — Application Package Initializer
================================================

What: Marks the `hitsongs` directory as a Python package.
Why:  Enables module imports like `from hitsongs.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    Every request flows through the same three-stage pipeline:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← path parameters in, JSON out
    ├─────────────────────────────────────┤
    │   Parameter Validator (parameters)  │  ← counts parsed and clamped
    ├─────────────────────────────────────┤
    │    Query Dispatcher (catalog)       │  ← Selection / ProcedureCall
    ├─────────────────────────────────────┤
    │   Query Backend (Supabase/PostgREST)│  ← the only remote call
    ├─────────────────────────────────────┤
    │   Response Normalizer (responses)   │  ← error / 404 / 200
    └─────────────────────────────────────┘

    Nothing is persisted or cached locally; the remote database is the
    single source of truth.
"""

__version__ = "1.0.0"
