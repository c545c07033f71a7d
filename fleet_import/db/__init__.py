"""Customer / truck persistence adapters."""

from .memory import MemoryFleetStore
from .postgres import PostgresFleetStore
from .store import NESTED_COLUMNS, UNIQUE_VIOLATION, CustomerRef, FleetStore, StoreError

__all__ = [
    "NESTED_COLUMNS",
    "UNIQUE_VIOLATION",
    "CustomerRef",
    "FleetStore",
    "MemoryFleetStore",
    "PostgresFleetStore",
    "StoreError",
]
