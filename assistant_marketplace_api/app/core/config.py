"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API runs out of the box with an in‑memory store.  In a production
deployment override these via environment variables.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Assistant Marketplace API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # The signed session token travels in this cookie.  The same token is
    # also accepted in an ``Authorization: Bearer`` header for API clients
    # that do not keep cookies.
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "session")
    session_cookie_secure: bool = _env_flag("SESSION_COOKIE_SECURE")

    # ``memory`` keeps all records in process memory (lost on restart);
    # ``sqlite`` persists them to ``database_url``.
    storage_backend: str = os.getenv("STORAGE_BACKEND", "memory")

    # Path to the SQLite database file.  Relative paths are resolved
    # against the package root by ``core.db``.
    database_url: str = os.getenv("DATABASE_URL", "marketplace.db")

    default_search_radius_km: float = float(os.getenv("DEFAULT_SEARCH_RADIUS_KM", "10"))

    # Optional administrator created on startup when all three are set
    # and no user with that username exists yet.
    admin_username: str = os.getenv("ADMIN_USERNAME", "")
    admin_email: str = os.getenv("ADMIN_EMAIL", "")
    admin_password: str = os.getenv("ADMIN_PASSWORD", "")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
