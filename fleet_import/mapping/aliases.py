from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

import yaml

"""Column alias table loader.

The table maps each canonical truck field to the header spellings seen in
customer exports. YAML mapping order is preserved and is the match priority,
so reordering fields in column_aliases.yml changes which field wins an
ambiguous header.
"""

__all__ = [
    "ALIAS_TABLE_PATH",
    "AliasTableError",
    "COLUMN_ALIASES",
    "load_alias_table",
]

ALIAS_TABLE_PATH = Path(__file__).with_name("column_aliases.yml")


class AliasTableError(Exception):
    pass


def load_alias_table(path: Path = ALIAS_TABLE_PATH) -> Mapping[str, tuple[str, ...]]:
    """Load and freeze the alias table.

    Args:
        path: YAML file of ``field: [alias, ...]``

    Returns:
        Read-only mapping of field name -> tuple of aliases, in file order

    Raises:
        AliasTableError: file missing, invalid YAML, or wrong shape
    """
    if not path.exists():
        raise AliasTableError(f"alias table not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise AliasTableError(f"invalid alias table yaml: {e}") from e

    if not isinstance(data, dict) or not data:
        raise AliasTableError(f"alias table must be a non-empty mapping: {path}")

    table: dict[str, tuple[str, ...]] = {}
    for field_name, aliases in data.items():
        if not isinstance(aliases, list) or not all(isinstance(a, str) for a in aliases):
            raise AliasTableError(f"aliases for '{field_name}' must be a list of strings")
        table[str(field_name)] = tuple(a.strip().lower() for a in aliases)
    return MappingProxyType(table)


COLUMN_ALIASES: Mapping[str, tuple[str, ...]] = load_alias_table()
