from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

"""TransformedRow model: one data row keyed by canonical truck field."""

__all__ = [
    "RowStatus",
    "TransformedRow",
    "TRANSIENT_KEYS",
]

# preview-only keys, never persisted
TRANSIENT_KEYS = ("row_number", "_status", "_status_message")


class RowStatus(Enum):
    """Preview classification of a row.

    - VALID: has a usable identity key
    - WARNING: VIN present but not 17 characters
    - ERROR: neither VIN nor truck number
    """
    VALID = "valid"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class TransformedRow:
    """A data row after column mapping.

    row_number is the 1-based line of the row in the source file, counting
    the header and any skipped preamble rows.
    """
    values: dict[str, str]  # canonical field -> trimmed cell text
    row_number: int | None = None
    status: RowStatus = RowStatus.VALID
    status_message: str = ""

    def get(self, field_name: str) -> str:
        return (self.values.get(field_name) or "").strip()

    def to_preview_dict(self) -> dict[str, Any]:
        """Flat dict for the review UI (values plus transient keys)."""
        return {
            "row_number": self.row_number,
            **self.values,
            "_status": self.status.value,
            "_status_message": self.status_message,
        }

    @classmethod
    def from_preview_dict(cls, data: Mapping[str, Any]) -> TransformedRow:
        """Rebuild a row from a (possibly edited) preview dict.

        Transient keys are dropped from values; None cells become "".
        """
        values = {
            str(k): "" if v is None else str(v)
            for k, v in data.items()
            if k not in TRANSIENT_KEYS
        }
        row_number = data.get("row_number")
        return cls(values=values, row_number=int(row_number) if row_number is not None else None)
