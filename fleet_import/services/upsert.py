from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from ..db.store import FleetStore, StoreError
from .truck_payload import map_row_to_truck_data

"""Per-row customer resolution and truck upsert.

One row = one self-contained sequence of store calls. There is no
transaction across rows; two concurrent imports of the same VIN race on
create-vs-update and the unique constraint on (company_id, vin) decides.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "VIN_LENGTH",
    "IDENTITY_FIELDS",
    "RowOutcome",
    "find_or_create_customer",
    "process_row",
]

VIN_LENGTH = 17

# never changed by an update
IDENTITY_FIELDS = ("company_id", "vin")

ACTION_CREATED = "created"
ACTION_UPDATED = "updated"
ACTION_SKIPPED = "skipped"
ACTION_INSERT_FAILED = "insert_failed"
ACTION_UPDATE_FAILED = "update_failed"
ACTION_ERROR = "error"


@dataclass(frozen=True)
class RowOutcome:
    success: bool
    action: str
    error: str | None = None

    @property
    def is_skip(self) -> bool:
        return self.action == ACTION_SKIPPED


def find_or_create_customer(
    store: FleetStore,
    company_id: str,
    external_id: str | None,
    name: str | None,
) -> str | None:
    """Resolve the customer for a row, creating it when unknown.

    Lookup order: external_id, then case-insensitive name. A name match
    without an external_id gets the supplied one backfilled.

    Best effort: store failures are logged and yield None so the truck is
    still written, just without a customer link.
    """
    if not external_id and not name:
        return None

    try:
        if external_id:
            found = store.find_customer_by_external_id(company_id, external_id)
            if found is not None:
                return found.id

        if name:
            found = store.find_customer_by_name(company_id, name)
            if found is not None:
                if external_id and not found.external_id:
                    store.set_customer_external_id(found.id, external_id)
                return found.id

        return store.insert_customer(
            company_id,
            name or f"Customer {external_id}",
            external_id or None,
        )
    except StoreError as e:
        logger.warning(
            "customer resolution failed company=%s external_id=%s name=%s: %s",
            company_id,
            external_id,
            name,
            e,
        )
        return None


def _identity_error(vin: str, truck_number: str) -> str | None:
    if not vin and not truck_number:
        return "Either VIN or Truck Number is required"
    if vin and len(vin) != VIN_LENGTH:
        return f"Invalid VIN length: {len(vin)} (expected {VIN_LENGTH})"
    return None


def process_row(
    store: FleetStore,
    row: Mapping[str, str],
    company_id: str,
    row_number: int,
) -> RowOutcome:
    """Validate, resolve and upsert one transformed row.

    Never raises: every failure is reported through the outcome.
    """
    try:
        vin = (row.get("vin") or "").strip().upper()
        truck_number = (row.get("truck_number") or "").strip()

        problem = _identity_error(vin, truck_number)
        if problem:
            return RowOutcome(success=False, action=ACTION_SKIPPED, error=problem)

        customer_id = find_or_create_customer(
            store,
            company_id,
            (row.get("customer_number") or "").strip() or None,
            (row.get("customer_name") or "").strip() or None,
        )

        existing_id = store.find_truck_by_vin(company_id, vin) if vin else None
        truck_data = map_row_to_truck_data(row, company_id, customer_id)

        if existing_id is not None:
            for key in IDENTITY_FIELDS:
                truck_data.pop(key, None)
            try:
                store.update_truck(existing_id, truck_data)
            except StoreError as e:
                return RowOutcome(success=False, action=ACTION_UPDATE_FAILED, error=str(e))
            return RowOutcome(success=True, action=ACTION_UPDATED)

        if not vin:
            return RowOutcome(success=False, action=ACTION_SKIPPED, error="VIN is required for new trucks")

        try:
            store.insert_truck(truck_data)
        except StoreError as e:
            if e.is_unique_violation:
                return RowOutcome(success=False, action=ACTION_SKIPPED, error="Duplicate VIN")
            return RowOutcome(success=False, action=ACTION_INSERT_FAILED, error=str(e))
        return RowOutcome(success=True, action=ACTION_CREATED)

    except Exception as e:
        logger.exception("row %d: unexpected error", row_number)
        return RowOutcome(success=False, action=ACTION_ERROR, error=str(e))
