from __future__ import annotations

import json
import re
from pathlib import Path

import pandas as pd
import pytest

from fleet_import.cli import main as cli_main

"""End-to-end CLI runs in mock mode (DISABLE_DB_CONNECT=1).

Covers an enterprise export with a preamble and AS400 code legend, the same
data delivered as .xlsx, and a mixed file that ends in partial failure.
"""

ENTERPRISE_EXPORT = (
    "This is the title: Fleet Equipment Listing\n"
    "Only include columns you need. Do not include retired units.\n"
    "Note: one row per unit\n"
    "Unit #,Serial Number,Manufacturer,Equipment Model,Model Year,Customer Number,Customer Name,EN - Value\n"
    "1042,1FUJGLDR9PLBX1236,Freightliner,Cascadia,2022,C100,Acme Co,Cummins\n"
    "1043,1FUJGLDR9PLBX1237,International,LT625,2021,C100,Acme Co,Navistar\n"
    '1044,4V4NC9EH5LN223344,Volvo,VNL 760,2020,C200,"Beta Freight, LLC",Volvo\n'
)

SUMMARY_RE = re.compile(
    r"^SUMMARY rows=(\d+) created=(\d+) updated=(\d+) skipped=(\d+) failed=(\d+) elapsed_sec=[0-9.]+$",
    re.MULTILINE,
)


@pytest.fixture()
def enterprise_csv(temp_workdir: Path) -> Path:
    p = temp_workdir / "data" / "fleet_export.csv"
    p.write_text(ENTERPRISE_EXPORT, encoding="utf-8")
    return p


def test_enterprise_export_imports_all_rows(write_config, enterprise_csv: Path, no_db, capsys):
    code = cli_main([str(enterprise_csv)])
    out = capsys.readouterr().out

    assert code == 0
    assert "Skipped 3 instruction/header row(s)" in out
    m = SUMMARY_RE.search(out)
    assert m is not None
    assert m.groups() == ("3", "3", "0", "0", "0")


def test_enterprise_export_preview(write_config, enterprise_csv: Path, capsys):
    code = cli_main([str(enterprise_csv), "--preview"])
    out = capsys.readouterr().out

    assert code == 0
    assert "Unit # -> truck_number" in out
    assert "Serial Number -> vin" in out
    assert "EN - Value -> engine_manufacturer" in out
    assert "preview valid=3 flagged=0" in out
    assert "SUMMARY" not in out


def test_xlsx_source(write_config, temp_workdir: Path, no_db, capsys):
    rows = [line.split(",") for line in ENTERPRISE_EXPORT.splitlines()[3:5]]
    p = temp_workdir / "data" / "fleet_export.xlsx"
    with pd.ExcelWriter(p, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name="Fleet", header=False, index=False)

    code = cli_main([str(p)])
    m = SUMMARY_RE.search(capsys.readouterr().out)
    assert code == 0
    assert m.groups() == ("1", "1", "0", "0", "0")


def test_partial_failure_writes_error_log(write_config, temp_workdir: Path, no_db, capsys):
    p = temp_workdir / "data" / "mixed.csv"
    p.write_text(
        "VIN,Unit Number,Make\n"
        "1FUJGLDR9PLBX1236,FB-001,Mack\n"
        ",FB-002,Mack\n"
        "1FUJGLDR9PLBX123,FB-003,Mack\n"
        ",,Mack\n",
        encoding="utf-8",
    )
    code = cli_main([str(p), "--exclude", "0"])
    out = capsys.readouterr().out

    assert code == 2
    assert SUMMARY_RE.search(out).groups() == ("3", "0", "0", "3", "0")

    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    records = [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]
    assert [(r["row"], r["message"]) for r in records] == [
        (3, "VIN is required for new trucks"),
        (4, "Invalid VIN length: 16 (expected 17)"),
        (5, "Either VIN or Truck Number is required"),
    ]
    assert {r["file"] for r in records} == {"mixed.csv"}
