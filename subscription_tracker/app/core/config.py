"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts without any configuration in development.  In a
production deployment you should at least override ``SESSION_SECRET``
and point ``DATABASE_URL`` at a persistent location.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Subscription Tracker")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Path or connection string for the SQLite database.  A relative
    # path is resolved relative to the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "subscriptions.db")

    # Secret used to sign the session cookie.  Rotating it invalidates
    # every outstanding session cookie.
    session_secret: str = os.getenv("SESSION_SECRET", "development-secret-key")
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "streaming.session")
    session_ttl_seconds: int = int(os.getenv("SESSION_TTL_SECONDS", str(24 * 60 * 60)))

    # ``memory`` keeps sessions in process; ``sqlite`` stores them in the
    # ``sessions`` table of the application database so they survive
    # restarts.
    session_backend: str = os.getenv("SESSION_BACKEND", "memory")
    session_cookie_secure: bool = os.getenv("SESSION_COOKIE_SECURE", "false").lower() in {"1", "true", "yes"}

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
