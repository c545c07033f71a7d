from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from .row_data import TransformedRow

"""Result models for preview and commit runs.

PreviewResult is what the review step shows before anything is written;
ImportResult is returned once per commit and never persisted.
"""

__all__ = [
    "ImportSummary",
    "RowError",
    "ImportResult",
    "PreviewResult",
]


@dataclass(frozen=True)
class ImportSummary:
    """Per-import counters.

    created + updated + skipped + failed == total once every selected row
    has been processed.
    """
    total: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0


@dataclass(frozen=True)
class RowError:
    row: int  # 1-based source row number
    error: str
    action: str


@dataclass(frozen=True)
class ImportResult:
    """Commit-mode output.

    errors holds at most the display limit; the full list goes to the
    error log file.
    """
    success: bool
    summary: ImportSummary
    errors: list[RowError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    column_mapping: list[str] = field(default_factory=list)
    error: str | None = None  # structural failure reason when success is False
    elapsed_seconds: float = 0.0

    @property
    def has_row_failures(self) -> bool:
        return self.summary.skipped > 0 or self.summary.failed > 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "summary": asdict(self.summary),
            "errors": [asdict(e) for e in self.errors],
            "warnings": list(self.warnings),
            "column_mapping": list(self.column_mapping),
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class PreviewResult:
    """Preview-mode output consumed by the review step."""
    success: bool
    total_rows: int = 0
    preview_rows: list[TransformedRow] = field(default_factory=list)
    column_mapping: list[str] = field(default_factory=list)  # mapped field names
    header_to_field_map: dict[str, str] = field(default_factory=dict)
    ignored_headers: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    is_valid: bool = False
    missing_fields: list[str] = field(default_factory=list)
    original_headers: list[str] = field(default_factory=list)
    skipped_rows: int = 0
    parsing_note: str | None = None
    error: str | None = None

    @property
    def flagged_rows(self) -> list[TransformedRow]:
        """Rows with a warning or error status."""
        return [r for r in self.preview_rows if r.status.value != "valid"]

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "total_rows": self.total_rows,
            "preview_rows": [r.to_preview_dict() for r in self.preview_rows],
            "column_mapping": list(self.column_mapping),
            "header_to_field_map": dict(self.header_to_field_map),
            "ignored_headers": list(self.ignored_headers),
            "warnings": list(self.warnings),
            "is_valid": self.is_valid,
            "missing_fields": list(self.missing_fields),
            "original_headers": list(self.original_headers),
            "skipped_rows": self.skipped_rows,
            "parsing_note": self.parsing_note,
            "error": self.error,
        }
