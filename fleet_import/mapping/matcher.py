from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from .aliases import COLUMN_ALIASES
from .normalizer import normalize_header

"""Column matching, row transformation and mapping validation.

Matching runs two passes over the alias table:

1. exact: the normalized header equals an alias (any field)
2. token/substring: aliases of 3 chars or fewer must appear as a whole
   header token; longer aliases may be contained in the header or contain it

The exact pass must stay first. Short AS400 codes such as ``en`` would
otherwise lose to a longer alias's substring test.
"""

__all__ = [
    "SHORT_ALIAS_MAX_LEN",
    "ColumnMapping",
    "MappingValidation",
    "map_column_to_field",
    "create_column_mapping",
    "transform_row",
    "validate_column_mapping",
]

SHORT_ALIAS_MAX_LEN = 3
RECOMMENDED_FIELDS = ("make", "model", "year")

_SURROUNDING_QUOTE = re.compile(r'^"|"$')


def map_column_to_field(
    header: str | None,
    aliases: Mapping[str, Sequence[str]] = COLUMN_ALIASES,
) -> str | None:
    """Return the canonical field for a raw header, or None if unrecognised.

    Unrecognised columns are ignored downstream, never guessed.
    """
    normalized = normalize_header(header)
    if not normalized:
        return None

    tokens = normalized.split(" ")

    for field_name, names in aliases.items():
        if normalized in names:
            return field_name

    for field_name, names in aliases.items():
        for alias in names:
            if len(alias) <= SHORT_ALIAS_MAX_LEN:
                # "bl" must not hit "visible"
                if alias in tokens:
                    return field_name
            elif alias in normalized or normalized in alias:
                return field_name

    return None


@dataclass(frozen=True)
class ColumnMapping:
    """Header row -> canonical field assignment for one import.

    ``index_to_field`` holds each column index at most once and each field
    at most once (first matching column wins).
    """
    headers: tuple[str, ...]
    index_to_field: Mapping[int, str] = field(default_factory=dict)

    @property
    def fields(self) -> list[str]:
        """Mapped field names in column order."""
        return [self.index_to_field[i] for i in sorted(self.index_to_field)]

    def header_to_field(self) -> dict[str, str]:
        result: dict[str, str] = {}
        for index in sorted(self.index_to_field):
            header = self.headers[index] if index < len(self.headers) else ""
            if header:
                result[header] = self.index_to_field[index]
        return result

    def ignored_headers(self) -> list[str]:
        return [h for i, h in enumerate(self.headers) if i not in self.index_to_field]

    def __len__(self) -> int:
        return len(self.index_to_field)


def create_column_mapping(
    headers: Sequence[str],
    aliases: Mapping[str, Sequence[str]] = COLUMN_ALIASES,
) -> ColumnMapping:
    """Build the column mapping for a header row."""
    index_to_field: dict[int, str] = {}
    seen: set[str] = set()
    for index, header in enumerate(headers):
        field_name = map_column_to_field(header, aliases)
        if field_name is None or field_name in seen:
            continue
        index_to_field[index] = field_name
        seen.add(field_name)
    return ColumnMapping(headers=tuple(headers), index_to_field=MappingProxyType(index_to_field))


def transform_row(values: Sequence[str], mapping: ColumnMapping) -> dict[str, str]:
    """Pick mapped cells out of a raw row, keyed by canonical field.

    Cells are trimmed and lose one layer of surrounding double quotes. Short
    rows yield "" for the missing columns.
    """
    row: dict[str, str] = {}
    for index, field_name in mapping.index_to_field.items():
        raw = values[index] if index < len(values) else None
        value = (raw or "").strip()
        row[field_name] = _SURROUNDING_QUOTE.sub("", value)
    return row


@dataclass(frozen=True)
class MappingValidation:
    is_valid: bool
    missing_fields: list[str]
    warnings: list[str]
    mapped_fields: list[str]


def validate_column_mapping(mapping: ColumnMapping) -> MappingValidation:
    """Check that at least one identity column (VIN / truck number) is mapped.

    Missing make/model/year only produce warnings.
    """
    mapped = mapping.fields
    mapped_set = set(mapped)
    missing: list[str] = []
    warnings: list[str] = []

    if "vin" not in mapped_set and "truck_number" not in mapped_set:
        missing.append("VIN or Truck Number")

    for name in RECOMMENDED_FIELDS:
        if name not in mapped_set:
            warnings.append(f"{name.capitalize()} column not found - will be empty")

    return MappingValidation(
        is_valid=not missing,
        missing_fields=missing,
        warnings=warnings,
        mapped_fields=mapped,
    )
