from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

"""Data store contract for customers and trucks.

Everything is company scoped. Implementations raise StoreError for any
backend failure; ``code`` carries the SQLSTATE when there is one so callers
can tell a duplicate VIN race (23505) from other failures.
"""

__all__ = [
    "UNIQUE_VIOLATION",
    "NESTED_COLUMNS",
    "TRUCK_COLUMNS",
    "CustomerRef",
    "FleetStore",
    "StoreError",
]

UNIQUE_VIOLATION = "23505"

# JSON sub-documents on trucks; merged (not replaced) on update
NESTED_COLUMNS = (
    "engine",
    "transmission",
    "drivetrain",
    "emissions",
    "braking",
    "fuel_system",
    "maintenance",
    "electrical",
    "electronics",
    "cooling",
)

TRUCK_COLUMNS = frozenset({
    "company_id",
    "customer_id",
    "vin",
    "unit_id",
    "truck_number",
    "year",
    "make",
    "model",
    "vehicle_class",
    "body_type",
    "odometer_miles",
    "engine_hours",
    "license_plate",
    "fleet_assignment",
    "customer_name",
    "notes",
    "in_service_date",
    *NESTED_COLUMNS,
})


class StoreError(Exception):
    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code

    @property
    def is_unique_violation(self) -> bool:
        return self.code == UNIQUE_VIOLATION


@dataclass(frozen=True)
class CustomerRef:
    id: str
    external_id: str | None = None


class FleetStore(Protocol):
    def find_customer_by_external_id(self, company_id: str, external_id: str) -> CustomerRef | None: ...

    def find_customer_by_name(self, company_id: str, name: str) -> CustomerRef | None:
        """Case-insensitive exact name match."""
        ...

    def set_customer_external_id(self, customer_id: str, external_id: str) -> None: ...

    def insert_customer(self, company_id: str, name: str, external_id: str | None) -> str: ...

    def find_truck_by_vin(self, company_id: str, vin: str) -> str | None: ...

    def insert_truck(self, data: Mapping[str, Any]) -> str: ...

    def update_truck(self, truck_id: str, data: Mapping[str, Any]) -> None: ...
