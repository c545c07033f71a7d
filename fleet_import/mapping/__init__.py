"""Header -> canonical truck field mapping.

The alias table itself is data (column_aliases.yml); the modules here hold the
normalisation and matching rules applied to it.
"""

from .aliases import COLUMN_ALIASES, AliasTableError, load_alias_table
from .matcher import (
    ColumnMapping,
    MappingValidation,
    create_column_mapping,
    map_column_to_field,
    transform_row,
    validate_column_mapping,
)
from .normalizer import normalize_header

__all__ = [
    "COLUMN_ALIASES",
    "AliasTableError",
    "load_alias_table",
    "ColumnMapping",
    "MappingValidation",
    "create_column_mapping",
    "map_column_to_field",
    "transform_row",
    "validate_column_mapping",
    "normalize_header",
]
