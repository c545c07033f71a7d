from __future__ import annotations

from pathlib import Path

import pytest

from fleet_import.config.loader import ConfigError, load_config
from fleet_import.models.config_models import DEFAULT_ERROR_DISPLAY_LIMIT, DEFAULT_MAX_ROWS


def test_load_config_ok(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.company_id == "company-1"
    assert cfg.max_rows == 5000
    assert cfg.error_display_limit == 50
    assert cfg.database.host == "localhost"
    assert cfg.database.port == 5432
    assert cfg.database.dsn is None


def test_defaults_applied(temp_workdir: Path):
    p = temp_workdir / "config" / "import.yml"
    p.write_text("company_id: acme\n", encoding="utf-8")
    cfg = load_config(p)
    assert cfg.max_rows == DEFAULT_MAX_ROWS
    assert cfg.error_display_limit == DEFAULT_ERROR_DISPLAY_LIMIT
    assert cfg.database.host is None


def test_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "nope.yml")


def test_invalid_yaml(temp_workdir: Path):
    p = temp_workdir / "config" / "import.yml"
    p.write_text("company_id: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(p)


@pytest.mark.parametrize(
    "text",
    [
        "max_rows: 10\n",  # company_id missing
        "company_id: acme\nmax_rows: lots\n",
        "company_id: acme\nsheet_mappings: {}\n",
        "company_id: acme\ndatabase:\n  port: '5432'\n",
        "company_id: ''\n",
    ],
)
def test_schema_violations(temp_workdir: Path, text: str):
    p = temp_workdir / "config" / "import.yml"
    p.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(p)


def test_empty_file_reports_missing_company(temp_workdir: Path):
    p = temp_workdir / "config" / "import.yml"
    p.write_text("", encoding="utf-8")
    with pytest.raises(ConfigError, match="company_id"):
        load_config(p)


def test_every_violation_reported_with_its_key(temp_workdir: Path):
    p = temp_workdir / "config" / "import.yml"
    p.write_text("company_id: acme\nmax_rows: 0\ndatabase:\n  port: '5432'\n", encoding="utf-8")
    with pytest.raises(ConfigError) as exc:
        load_config(p)
    message = str(exc.value)
    assert "database.port: '5432' is not of type 'integer'" in message
    assert "max_rows: 0 is less than the minimum of 1" in message
