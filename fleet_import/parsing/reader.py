from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from .preamble import locate_header
from .tokenizer import tokenize_csv

"""Source file reading and header/data split.

CSV text goes through the quote-aware tokenizer. Spreadsheet exports
(.xlsx/.xls) are read with pandas with every cell as text, so both paths feed
the same list-of-string-rows shape into the preamble scan.
"""

__all__ = [
    "CSV_SUFFIXES",
    "EXCEL_SUFFIXES",
    "ParsedCsv",
    "SourceReadError",
    "parse_csv",
    "read_source_rows",
]

CSV_SUFFIXES = {".csv", ".txt"}
EXCEL_SUFFIXES = {".xlsx", ".xls"}


class SourceReadError(Exception):
    """Raised when the source file is missing, unreadable or of unknown type."""


@dataclass(frozen=True)
class ParsedCsv:
    headers: list[str]
    rows: list[list[str]]  # data rows only
    skipped_rows: int  # rows above the header


def parse_csv(source: str | Sequence[Sequence[str]]) -> ParsedCsv:
    """Split raw CSV text (or already tokenized rows) into header + data rows."""
    all_rows = tokenize_csv(source) if isinstance(source, str) else [list(r) for r in source]
    if not all_rows:
        return ParsedCsv(headers=[], rows=[], skipped_rows=0)

    location = locate_header(all_rows)
    if location.header_index is None:
        return ParsedCsv(headers=[], rows=[], skipped_rows=location.skipped_count)

    return ParsedCsv(
        headers=list(all_rows[location.header_index]),
        rows=location.data_rows,
        skipped_rows=location.skipped_count,
    )


def read_source_rows(path: Path) -> list[list[str]]:
    """Read a fleet export into rows of trimmed string cells.

    Parameters
    ----------
    path: .csv/.txt (UTF-8, BOM allowed) or .xlsx/.xls (first sheet)

    Raises
    ------
    SourceReadError: missing file, unsupported suffix, decode / parse failure
    """
    if not path.exists():
        raise SourceReadError(f"source file not found: {path}")

    suffix = path.suffix.lower()
    if suffix in CSV_SUFFIXES:
        try:
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(f"failed reading {path.name}: {e}") from e
        return tokenize_csv(text)

    if suffix in EXCEL_SUFFIXES:
        return _read_excel_rows(path)

    raise SourceReadError(f"unsupported source type '{suffix}' (expected .csv or .xlsx)")


def _read_excel_rows(path: Path) -> list[list[str]]:
    # keep_default_na=False: "NA" / "N/A" stay as text, empty cells become ""
    try:
        df = pd.read_excel(path, sheet_name=0, header=None, dtype=str, keep_default_na=False)
    except Exception as e:
        raise SourceReadError(f"failed reading {path.name}: {e}") from e

    rows: list[list[str]] = []
    for raw in df.itertuples(index=False, name=None):
        cells = ["" if v is None else str(v).strip() for v in raw]
        if any(cells):
            rows.append(cells)
    return rows
