from __future__ import annotations

import re

"""Cell value coercion for truck columns.

Exports carry numbers with thousands separators ("125,000") and dates in
either ISO or US order. Anything that cannot be read becomes None so that the
column is left empty rather than filled with a guess.
"""

__all__ = [
    "parse_int",
    "parse_date",
]

_LEADING_INT = re.compile(r"^[+-]?\d+")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_US_DATE = re.compile(r"^(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})")


def parse_int(text: str | None) -> int | None:
    """Leading integer of a cell (``"3.42"`` -> 3, ``"125,000 mi"`` -> 125000)."""
    if not text:
        return None
    cleaned = text.strip().replace(",", "")
    match = _LEADING_INT.match(cleaned)
    if match is None:
        return None
    return int(match.group(0))


def parse_date(text: str | None) -> str | None:
    """Return an ISO ``YYYY-MM-DD`` string or None.

    Accepted: ``YYYY-MM-DD`` (anything after the date is ignored),
    ``M/D/YYYY`` and ``M-D-YYYY``.
    """
    if not text:
        return None
    cleaned = text.strip()
    if not cleaned:
        return None

    iso = _ISO_DATE.match(cleaned)
    if iso:
        return f"{iso.group(1)}-{iso.group(2)}-{iso.group(3)}"

    us = _US_DATE.match(cleaned)
    if us:
        month = us.group(1).zfill(2)
        day = us.group(2).zfill(2)
        return f"{us.group(3)}-{month}-{day}"

    return None
