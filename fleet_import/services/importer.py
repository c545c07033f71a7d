from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from ..db.store import FleetStore
from ..logging.error_log import ErrorLogBuffer
from ..mapping.matcher import (
    ColumnMapping,
    create_column_mapping,
    transform_row,
    validate_column_mapping,
)
from ..models.config_models import DEFAULT_ERROR_DISPLAY_LIMIT, DEFAULT_MAX_ROWS
from ..models.error_record import ErrorRecord
from ..models.processing_result import ImportResult, ImportSummary, PreviewResult, RowError
from ..models.row_data import RowStatus, TransformedRow
from ..parsing.reader import ParsedCsv, parse_csv
from .upsert import ACTION_CREATED, ACTION_UPDATED, VIN_LENGTH, process_row

"""Bulk truck import orchestration.

Two entry points mirror the review workflow:

- preview: parse, map and classify every row without touching the store
- commit: the same parse/map, then resolve customers and upsert trucks row
  by row (``bulk_import_trucks``), or commit rows the user already reviewed
  and edited (``bulk_import_from_preview``)

Structural problems (no data, nothing selected, no identity column) end the
run before any row is written and come back as ``success=False``. Row
problems are counted and listed, never raised.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ProgressCallback",
    "preview_csv",
    "preview_rows",
    "bulk_import_trucks",
    "bulk_import_from_preview",
    "import_rows",
    "source_row_number",
]

ProgressCallback = Callable[[int, int], None]

PREVIEW_SOURCE = "<preview>"


def source_row_number(data_index: int, skipped_rows: int) -> int:
    """1-based line of a data row in the source: +1 header, +1 one-based."""
    return data_index + skipped_rows + 2


def _classify(values: Mapping[str, str]) -> tuple[RowStatus, str]:
    vin = (values.get("vin") or "").strip().upper()
    truck_number = (values.get("truck_number") or "").strip()
    if not vin and not truck_number:
        return RowStatus.ERROR, "Missing VIN and Truck Number"
    if vin and len(vin) != VIN_LENGTH:
        return RowStatus.WARNING, f"Invalid VIN length: {len(vin)}"
    return RowStatus.VALID, ""


def _empty_summary(total: int = 0) -> ImportSummary:
    return ImportSummary(total=total)


def _build_preview(parsed: ParsedCsv, max_rows: int) -> PreviewResult:
    if not parsed.rows:
        return PreviewResult(
            success=False,
            error="No data rows found",
            skipped_rows=parsed.skipped_rows,
            original_headers=list(parsed.headers),
        )

    total = len(parsed.rows)
    if total > max_rows:
        return PreviewResult(
            success=False,
            total_rows=total,
            error=f"Maximum {max_rows} trucks per upload. Please split your file.",
            skipped_rows=parsed.skipped_rows,
            original_headers=list(parsed.headers),
        )

    mapping = create_column_mapping(parsed.headers)
    validation = validate_column_mapping(mapping)

    preview: list[TransformedRow] = []
    for i, values in enumerate(parsed.rows):
        transformed = transform_row(values, mapping)
        status, message = _classify(transformed)
        preview.append(
            TransformedRow(
                values=transformed,
                row_number=source_row_number(i, parsed.skipped_rows),
                status=status,
                status_message=message,
            )
        )

    return PreviewResult(
        success=True,
        total_rows=total,
        preview_rows=preview,
        column_mapping=validation.mapped_fields,
        header_to_field_map=mapping.header_to_field(),
        ignored_headers=mapping.ignored_headers(),
        warnings=validation.warnings,
        is_valid=validation.is_valid,
        missing_fields=validation.missing_fields,
        original_headers=list(parsed.headers),
        skipped_rows=parsed.skipped_rows,
        parsing_note=(
            f"Skipped {parsed.skipped_rows} instruction/header row(s)"
            if parsed.skipped_rows > 0
            else None
        ),
    )


def preview_csv(text: str, *, max_rows: int = DEFAULT_MAX_ROWS) -> PreviewResult:
    """Parse and map CSV text for review; nothing is written."""
    return _build_preview(parse_csv(text), max_rows)


def preview_rows(raw_rows: Sequence[Sequence[str]], *, max_rows: int = DEFAULT_MAX_ROWS) -> PreviewResult:
    """Same as preview_csv for rows already read from a file (CSV or spreadsheet)."""
    return _build_preview(parse_csv(raw_rows), max_rows)


def import_rows(
    rows: Sequence[TransformedRow],
    company_id: str,
    store: FleetStore,
    on_progress: ProgressCallback | None = None,
    excluded_indices: Iterable[int] | None = None,
    *,
    error_log: ErrorLogBuffer | None = None,
    error_limit: int = DEFAULT_ERROR_DISPLAY_LIMIT,
    source_name: str = PREVIEW_SOURCE,
    warnings: Sequence[str] = (),
    column_mapping: Sequence[str] = (),
) -> ImportResult:
    """Resolve and upsert rows one at a time.

    Args:
        rows: Transformed rows (row_number falls back to index + 2)
        company_id: Tenant to write under
        store: Customer / truck store
        on_progress: Called with (done, total) after every row
        excluded_indices: Row positions (0-based) to leave out
        error_log: Receives every row error; flushed by the caller
        error_limit: Cap on ``errors`` in the returned result

    Returns:
        ImportResult; success is False only when nothing was selected
    """
    start = datetime.now(UTC)
    excluded = set(excluded_indices or ())
    selected = [(i, row) for i, row in enumerate(rows) if i not in excluded]

    if not selected:
        return ImportResult(
            success=False,
            summary=_empty_summary(),
            error="No rows selected for import",
        )

    total = len(selected)
    created = updated = skipped = failed = 0
    errors: list[RowError] = []

    for position, (index, row) in enumerate(selected):
        row_number = row.row_number if row.row_number is not None else index + 2
        outcome = process_row(store, row.values, company_id, row_number)

        if outcome.success:
            if outcome.action == ACTION_CREATED:
                created += 1
            elif outcome.action == ACTION_UPDATED:
                updated += 1
        else:
            if outcome.is_skip:
                skipped += 1
            else:
                failed += 1
            message = outcome.error or outcome.action
            errors.append(RowError(row=row_number, error=message, action=outcome.action))
            if error_log is not None:
                error_log.append(ErrorRecord.create(source_name, row_number, outcome.action, message))
            logger.debug("row %d %s: %s", row_number, outcome.action, message)

        if on_progress is not None:
            on_progress(position + 1, total)

    elapsed = (datetime.now(UTC) - start).total_seconds()
    summary = ImportSummary(
        total=total,
        created=created,
        updated=updated,
        skipped=skipped,
        failed=failed,
    )
    logger.info(
        "import complete total=%d created=%d updated=%d skipped=%d failed=%d",
        total,
        created,
        updated,
        skipped,
        failed,
    )
    return ImportResult(
        success=True,
        summary=summary,
        errors=errors[:error_limit],
        warnings=list(warnings),
        column_mapping=list(column_mapping),
        elapsed_seconds=elapsed,
    )


def bulk_import_trucks(
    source: str | Sequence[Sequence[str]],
    company_id: str,
    store: FleetStore,
    on_progress: ProgressCallback | None = None,
    excluded_indices: Iterable[int] | None = None,
    *,
    error_log: ErrorLogBuffer | None = None,
    error_limit: int = DEFAULT_ERROR_DISPLAY_LIMIT,
    source_name: str = "<csv>",
) -> ImportResult:
    """Parse, map and import a whole file.

    ``source`` is CSV text or rows already read from a file.
    ``excluded_indices`` are 0-based data row positions, as shown in preview.
    """
    parsed = parse_csv(source)
    logger.debug("detected headers: %s", parsed.headers)

    if not parsed.rows:
        return ImportResult(
            success=False,
            summary=_empty_summary(),
            error="No data rows found in CSV",
        )

    excluded = set(excluded_indices or ())
    selected_count = sum(1 for i in range(len(parsed.rows)) if i not in excluded)
    logger.info(
        "found %d columns, %d rows, %d selected for import (skipped %d preamble rows)",
        len(parsed.headers),
        len(parsed.rows),
        selected_count,
        parsed.skipped_rows,
    )
    if selected_count == 0:
        return ImportResult(
            success=False,
            summary=_empty_summary(),
            error="No rows selected for import",
        )

    mapping: ColumnMapping = create_column_mapping(parsed.headers)
    validation = validate_column_mapping(mapping)
    logger.info("column mapping: %s", mapping.header_to_field())

    if not validation.is_valid:
        return ImportResult(
            success=False,
            summary=_empty_summary(selected_count),
            warnings=validation.warnings,
            error=f"Missing required columns: {', '.join(validation.missing_fields)}",
        )
    for w in validation.warnings:
        logger.warning(w)

    rows = [
        TransformedRow(
            values=transform_row(values, mapping),
            row_number=source_row_number(i, parsed.skipped_rows),
        )
        for i, values in enumerate(parsed.rows)
    ]
    return import_rows(
        rows,
        company_id,
        store,
        on_progress,
        excluded,
        error_log=error_log,
        error_limit=error_limit,
        source_name=source_name,
        warnings=validation.warnings,
        column_mapping=validation.mapped_fields,
    )


def bulk_import_from_preview(
    preview: Sequence[TransformedRow | Mapping[str, Any]],
    company_id: str,
    store: FleetStore,
    on_progress: ProgressCallback | None = None,
    excluded_indices: Iterable[int] | None = None,
    *,
    error_log: ErrorLogBuffer | None = None,
    error_limit: int = DEFAULT_ERROR_DISPLAY_LIMIT,
) -> ImportResult:
    """Import reviewed (possibly edited) preview rows.

    Accepts TransformedRow objects or their preview dicts; the transient
    row_number / _status / _status_message keys are not persisted.
    """
    if not preview:
        return ImportResult(success=False, summary=_empty_summary(), error="No data to import")

    rows = [
        item if isinstance(item, TransformedRow) else TransformedRow.from_preview_dict(item)
        for item in preview
    ]
    # status is preview-only; drop it before commit
    rows = [TransformedRow(values=dict(r.values), row_number=r.row_number) for r in rows]

    excluded = set(excluded_indices or ())
    logger.info("importing %d preview rows (%d excluded)", len(rows), len(excluded))
    return import_rows(
        rows,
        company_id,
        store,
        on_progress,
        excluded,
        error_log=error_log,
        error_limit=error_limit,
    )
