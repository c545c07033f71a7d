from __future__ import annotations

from ..models.processing_result import ImportResult

"""SUMMARY line rendering.

Format:
SUMMARY rows={total} created={created} updated={updated} skipped={skipped}
failed={failed} elapsed_sec={elapsed}
"""

__all__ = [
    "format_seconds",
    "render_summary_line",
]


def format_seconds(value: float) -> str:
    """Compact seconds: integers without decimals, no scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(result: ImportResult) -> str:
    """Render the SUMMARY line for a commit result.

    Examples:
        >>> from fleet_import.models.processing_result import ImportSummary
        >>> r = ImportResult(success=True, summary=ImportSummary(3, 2, 1, 0, 0), elapsed_seconds=2.0)
        >>> render_summary_line(r)
        'SUMMARY rows=3 created=2 updated=1 skipped=0 failed=0 elapsed_sec=2'
    """
    s = result.summary
    return (
        f"SUMMARY rows={s.total} "
        f"created={s.created} "
        f"updated={s.updated} "
        f"skipped={s.skipped} "
        f"failed={s.failed} "
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}"
    )
