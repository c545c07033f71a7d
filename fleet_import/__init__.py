"""Fleet truck bulk importer.

Maps messy fleet exports (instruction preambles, AS400 code legends,
inconsistent headers) onto the canonical truck schema and upserts the rows
into a company-scoped customer / truck store.
"""

from .parsing.reader import ParsedCsv, parse_csv
from .services.importer import (
    bulk_import_from_preview,
    bulk_import_trucks,
    import_rows,
    preview_csv,
    preview_rows,
)

__version__ = "0.1.0"

__all__ = [
    "ParsedCsv",
    "parse_csv",
    "bulk_import_from_preview",
    "bulk_import_trucks",
    "import_rows",
    "preview_csv",
    "preview_rows",
    "__version__",
]
