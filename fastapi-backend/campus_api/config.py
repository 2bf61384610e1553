"""
Centralized settings for the campus complaint backend.

Provides a lightweight wrapper around environment variables (with `.env`
support for local development) so the rest of the codebase can import a single
`get_settings()` helper when configuration is needed.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional
import os

from dotenv import dotenv_values


DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./campus.db"


@dataclass(frozen=True)
class Settings:
    """Immutable view of application configuration."""

    # General
    environment: str
    host: str
    port: int
    allowed_origins: tuple[str, ...]

    # Database
    database_url: str

    # Accounts
    admin_email_domain: str

    # Observability
    log_level: str
    sentry_dsn: Optional[str]


def _env_lookup(key: str, env: dict[str, str], default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key) or env.get(key) or default


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


def normalize_database_url(url: str) -> str:
    """Rewrite sync Postgres URLs to the asyncpg driver."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql+psycopg2://"):
        return url.replace("postgresql+psycopg2://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url


@lru_cache()
def get_settings() -> Settings:
    """Load settings once per process."""

    env_path = Path(__file__).resolve().parents[2] / ".env"
    env_file = dotenv_values(str(env_path)) if env_path.exists() else {}

    return Settings(
        environment=_env_lookup("APP_ENV", env_file, "development"),
        host=_env_lookup("HOST", env_file, "0.0.0.0"),
        port=int(_env_lookup("PORT", env_file, "5000")),
        allowed_origins=_split_csv(_env_lookup("ALLOWED_ORIGINS", env_file, "*")),
        database_url=normalize_database_url(
            _env_lookup("DATABASE_URL", env_file, DEFAULT_DATABASE_URL)
        ),
        admin_email_domain=_env_lookup("ADMIN_EMAIL_DOMAIN", env_file, "@admin.com"),
        log_level=_env_lookup("LOG_LEVEL", env_file, "INFO").upper(),
        sentry_dsn=_env_lookup("SENTRY_DSN", env_file),
    )


__all__ = ["Settings", "get_settings", "normalize_database_url"]
