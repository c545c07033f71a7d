from __future__ import annotations

import json
from dataclasses import fields
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft7Validator

from ..models.config_models import (
    DEFAULT_ERROR_DISPLAY_LIMIT,
    DEFAULT_MAX_ROWS,
    DatabaseConfig,
    ImportConfig,
)

"""Reads the importer settings from YAML (config/import.yml by default).

The document is checked against config_schema.json, which ships with the
package, before anything is built from it. Every violation is reported in a
single ConfigError, each one prefixed with the key path it applies to
(``database.port: '5432' is not of type 'integer'``). Keys the file leaves
out take the ImportConfig defaults.
"""

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "ConfigError",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/import.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


@lru_cache(maxsize=1)
def _config_validator() -> Draft7Validator:
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    return Draft7Validator(schema)


def _check_against_schema(document: Any) -> None:
    problems = sorted(
        _config_validator().iter_errors(document),
        key=lambda err: [str(p) for p in err.path],
    )
    if not problems:
        return
    messages = []
    for err in problems:
        where = ".".join(str(p) for p in err.path)
        messages.append(f"{where}: {err.message}" if where else err.message)
    raise ConfigError("config validation failed: " + "; ".join(messages))


def _database_section(raw: dict[str, Any] | None) -> DatabaseConfig:
    raw = raw or {}
    return DatabaseConfig(**{f.name: raw.get(f.name) for f in fields(DatabaseConfig)})


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> ImportConfig:
    """Load, validate and default the import settings at *path*."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"config file not found: {path}") from e
    try:
        document = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _check_against_schema(document)

    return ImportConfig(
        company_id=document["company_id"],
        max_rows=document.get("max_rows", DEFAULT_MAX_ROWS),
        error_display_limit=document.get("error_display_limit", DEFAULT_ERROR_DISPLAY_LIMIT),
        database=_database_section(document.get("database")),
    )
