from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

"""Enterprise preamble detection.

AS400 / ERP exports often put a title, usage instructions and a field-code
legend ("EN - Value", "AD - Value", ...) above the real header row. The header
is located by scanning the first rows for the first data-shaped row and
walking back to the closest usable row before it.

Known limitation: the data-row heuristic (VIN shaped cell, or a 3+ digit
number in one of the first two cells) can fire on a header row that itself
holds numeric codes. Such a row is then treated as data.

When no plain row sits above the first data row, the nearest code legend row
is used as the header, and failing that the data row itself, rather than
falling back to the very first row of the file.
"""

__all__ = [
    "HEADER_SCAN_LIMIT",
    "HeaderLocation",
    "is_blank_row",
    "is_instruction_row",
    "is_data_row",
    "locate_header",
]

HEADER_SCAN_LIMIT = 10

INSTRUCTION_PHRASES = (
    "this is the title",
    "only include columns",
    "instruction",
    "do not include",
)
INSTRUCTION_PREFIXES = ("note:", "required:")
CODE_LEGEND_MARKER = " - value"

# 17 chars, no I / O / Q
_VIN_SHAPE = re.compile(r"^[A-HJ-NPR-Z0-9]{17}$", re.IGNORECASE)
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")
_UNIT_NUMBER = re.compile(r"^\d{3,}$")


@dataclass(frozen=True)
class HeaderLocation:
    """Result of the preamble scan.

    header_index is None only when the input has no usable row at all.
    skipped_count is the number of rows before the header.
    """
    header_index: int | None
    data_rows: list[list[str]]
    skipped_count: int

    @property
    def found(self) -> bool:
        return self.header_index is not None


def is_blank_row(values: Sequence[str]) -> bool:
    return not any(v and v.strip() for v in values)


def is_instruction_row(values: Sequence[str]) -> bool:
    """Title / instruction / AS400 code legend row."""
    first_cell = (values[0] if values else "").lower()
    if any(phrase in first_cell for phrase in INSTRUCTION_PHRASES):
        return True
    if first_cell.startswith(INSTRUCTION_PREFIXES):
        return True
    return CODE_LEGEND_MARKER in ",".join(values).lower()


def is_data_row(values: Sequence[str]) -> bool:
    """Row that looks like a truck record rather than a header."""
    for value in values:
        if isinstance(value, str) and _VIN_SHAPE.match(_NON_ALNUM.sub("", value)):
            return True
    for value in values[:2]:
        if _UNIT_NUMBER.match((value or "").strip()):
            return True
    return False


def _is_header_candidate(values: Sequence[str]) -> bool:
    return not is_blank_row(values) and not is_instruction_row(values)


def _is_code_legend(values: Sequence[str]) -> bool:
    first_cell = (values[0] if values else "").lower()
    if any(phrase in first_cell for phrase in INSTRUCTION_PHRASES):
        return False
    if first_cell.startswith(INSTRUCTION_PREFIXES):
        return False
    return CODE_LEGEND_MARKER in ",".join(values).lower()


def _header_before(rows: Sequence[Sequence[str]], data_index: int) -> int:
    """Closest usable header above a data row.

    Preference: plain row, then an AS400 code legend row ("EN - Value"
    headers map through the "xx value" aliases), then the data row itself.
    """
    for j in range(data_index - 1, -1, -1):
        if _is_header_candidate(rows[j]):
            return j
    for j in range(data_index - 1, -1, -1):
        if _is_code_legend(rows[j]):
            return j
    return data_index


def locate_header(rows: Sequence[Sequence[str]]) -> HeaderLocation:
    """Find the header row and the data rows that follow it.

    Walks the first HEADER_SCAN_LIMIT rows skipping blank and instruction
    rows:
    - first data-shaped row (not the very first row) -> header is the
      nearest earlier non-blank, non-instruction row (see _header_before)
    - first other non-instruction row -> that row is the header

    When the whole window is preamble, the first candidate after it is used.
    Instruction and blank rows after the header are dropped from data_rows.
    """
    header_index: int | None = None
    window = min(len(rows), HEADER_SCAN_LIMIT)

    for i in range(window):
        values = rows[i]
        if is_blank_row(values) or is_instruction_row(values):
            continue
        if is_data_row(values) and i > 0:
            header_index = _header_before(rows, i)
            break
        header_index = i
        break

    if header_index is None:
        for i in range(window, len(rows)):
            if _is_header_candidate(rows[i]):
                header_index = i
                break

    if header_index is None:
        return HeaderLocation(header_index=None, data_rows=[], skipped_count=len(rows))

    data_rows = [
        list(values)
        for values in rows[header_index + 1:]
        if _is_header_candidate(values)
    ]
    return HeaderLocation(
        header_index=header_index,
        data_rows=data_rows,
        skipped_count=header_index,
    )
