"""Import services: payload building, upsert, orchestration, progress and summary."""

from .importer import (
    bulk_import_from_preview,
    bulk_import_trucks,
    import_rows,
    preview_csv,
    preview_rows,
)
from .progress import RowProgressTracker
from .summary import render_summary_line
from .template import TEMPLATE_CSV, write_template
from .truck_payload import map_row_to_truck_data
from .upsert import find_or_create_customer, process_row

__all__ = [
    "bulk_import_from_preview",
    "bulk_import_trucks",
    "import_rows",
    "preview_csv",
    "preview_rows",
    "RowProgressTracker",
    "render_summary_line",
    "TEMPLATE_CSV",
    "write_template",
    "map_row_to_truck_data",
    "find_or_create_customer",
    "process_row",
]
