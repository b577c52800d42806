"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts without any configuration; override them via
environment variables in a real deployment.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "User Registry API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    # Optional prefix under which all routers are mounted, e.g. ``/api``.
    # Empty by default so the user routes live at ``/users``.
    api_prefix: str = os.getenv("API_PREFIX", "")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Which ``UserStore`` implementation backs the service: ``sqlite``
    # (persistent) or ``memory`` (lost on restart).
    user_store: str = os.getenv("USER_STORE", "sqlite")

    # Path for the SQLite database.  If a relative path is provided, it
    # will be resolved relative to the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "user_registry.db")

    # Have I Been Pwned range endpoint; the first five characters of the
    # SHA-1 digest are appended as a path segment.
    breach_check_url: str = os.getenv("BREACH_CHECK_URL", "https://api.pwnedpasswords.com/range")
    breach_check_timeout: float = float(os.getenv("BREACH_CHECK_TIMEOUT", "5"))

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at class definition time, environment variables should
# be set before importing this module.
settings = Settings()
