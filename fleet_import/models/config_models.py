from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the fleet truck importer.

Loaded from YAML by fleet_import.config.loader; kept free of I/O so the
services can be handed a config built in code (tests, embedding callers).
"""

__all__ = [
    "DEFAULT_MAX_ROWS",
    "DEFAULT_ERROR_DISPLAY_LIMIT",
    "DatabaseConfig",
    "ImportConfig",
]

DEFAULT_MAX_ROWS = 5000
DEFAULT_ERROR_DISPLAY_LIMIT = 50


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection fallback.

    Environment variables (.env, DATABASE_URL, PG*) take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration for an import run."""
    company_id: str  # tenant all customers / trucks are written under
    max_rows: int = DEFAULT_MAX_ROWS  # preview gate, larger files must be split
    error_display_limit: int = DEFAULT_ERROR_DISPLAY_LIMIT  # errors[] cap in results
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
