"""
Hit Songs API — Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the application factory, the backend connector and the
       command-line entry point.
When:  Loaded once at module import time; validated before the app serves traffic.
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Only the Supabase credentials are required; everything else has a
    development default.
    """

    # ── Supabase ──────────────────────────────────────────────────────────
    # What: Project URL of the hosted PostgREST service (https://<ref>.supabase.co)
    supabase_url: str = Field(
        default="",
        description="Supabase project URL"
    )

    # What: Public anon key; row level security on the remote side keeps it read-only
    supabase_anon_key: str = Field(
        default="",
        description="Supabase anon (public) API key"
    )

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # SUPABASE_URL and supabase_url both work
        "extra": "ignore",
    }

    @property
    def is_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    def validate_required(self) -> None:
        """
        What:  Validates that the Supabase credentials are present.
        When:  Called during app startup (lifespan).
        How:   Collects every missing value and raises one ValueError with guidance.
        """
        errors = []
        if not self.supabase_url:
            errors.append("SUPABASE_URL is not set (Project Settings → API → Project URL)")
        if not self.supabase_anon_key:
            errors.append("SUPABASE_ANON_KEY is not set (Project Settings → API → anon key)")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, read by the app factory and the CLI entry point
settings = Settings()
