"""Domain models for the fleet truck CSV importer."""

from .config_models import DatabaseConfig, ImportConfig
from .error_record import ErrorRecord
from .processing_result import ImportResult, ImportSummary, PreviewResult, RowError
from .row_data import RowStatus, TransformedRow

__all__ = [
    # Configuration models
    "DatabaseConfig",
    "ImportConfig",
    # Processing models
    "ErrorRecord",
    "ImportResult",
    "ImportSummary",
    "PreviewResult",
    "RowError",
    "RowStatus",
    "TransformedRow",
]
