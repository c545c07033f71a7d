# Shared pytest fixtures
from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import pytest

from fleet_import.db.memory import MemoryFleetStore
from fleet_import.logging.init import APP_LOGGER_NAME, reset_logging

COMPANY_ID = "company-1"


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return f"""company_id: {COMPANY_ID}
max_rows: 5000
error_display_limit: 50
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: fleetdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def memory_store() -> MemoryFleetStore:
    return MemoryFleetStore()


@pytest.fixture()
def company_id() -> str:
    return COMPANY_ID


@pytest.fixture()
def fleet_csv() -> str:
    return (
        "VIN,Unit Number,Make,Model,Year,Customer Name,Customer Number,Engine Model,Current Mileage\n"
        "1FUJGLDR9PLBX1236,FB-001,Freightliner,Cascadia,2022,Acme Co,C100,ISX15,\"125,000\"\n"
        "1FUJGLDR9PLBX1237,FB-002,International,LT625,2021,Acme Co,C100,DD15,98000\n"
    )


@pytest.fixture()
def preamble_csv() -> str:
    return (
        "This is the title of the fleet export\n"
        "Note: one row per truck\n"
        "Do not include retired units\n"
        "VIN,Unit Number,Make,Model,Year\n"
        "1FUJGLDR9PLBX1236,FB-001,Freightliner,Cascadia,2022\n"
        "1FUJGLDR9PLBX1237,FB-002,International,LT625,2021\n"
    )


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handlers hold the stdout of the test that created them
    reset_logging()
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    for h in app_logger.handlers[:]:
        app_logger.removeHandler(h)
    yield
    reset_logging()


@pytest.fixture()
def no_db(monkeypatch):
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("PGDSN", raising=False)
