from __future__ import annotations

import copy
import uuid
from collections.abc import Mapping
from typing import Any

from .store import NESTED_COLUMNS, UNIQUE_VIOLATION, CustomerRef, StoreError

"""In-memory FleetStore.

Backs the CLI mock mode (no database reachable, or DISABLE_DB_CONNECT=1) and
the test-suite. Mirrors the Postgres adapter's observable behaviour: unique
(company_id, vin), case-insensitive customer names, merge of nested columns
on update (sub-objects such as maintenance.body are merged too).
"""

__all__ = [
    "MemoryFleetStore",
]


def _merge_nested(stored: Mapping[str, Any] | None, incoming: Mapping[str, Any] | None) -> dict[str, Any]:
    merged = copy.deepcopy(dict(stored or {}))
    for key, value in (incoming or {}).items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = {**current, **copy.deepcopy(dict(value))}
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class MemoryFleetStore:
    def __init__(self) -> None:
        self.customers: dict[str, dict[str, Any]] = {}
        self.trucks: dict[str, dict[str, Any]] = {}

    def _new_id(self) -> str:
        return str(uuid.uuid4())

    # customers

    def find_customer_by_external_id(self, company_id: str, external_id: str) -> CustomerRef | None:
        for cid, c in self.customers.items():
            if c["company_id"] == company_id and c["external_id"] == external_id:
                return CustomerRef(id=cid, external_id=c["external_id"])
        return None

    def find_customer_by_name(self, company_id: str, name: str) -> CustomerRef | None:
        wanted = name.lower()
        for cid, c in self.customers.items():
            if c["company_id"] == company_id and (c["name"] or "").lower() == wanted:
                return CustomerRef(id=cid, external_id=c["external_id"])
        return None

    def set_customer_external_id(self, customer_id: str, external_id: str) -> None:
        if customer_id not in self.customers:
            raise StoreError(f"customer not found: {customer_id}")
        self.customers[customer_id]["external_id"] = external_id

    def insert_customer(self, company_id: str, name: str, external_id: str | None) -> str:
        if external_id is not None and self.find_customer_by_external_id(company_id, external_id):
            raise StoreError(
                f"duplicate customer external_id '{external_id}'", code=UNIQUE_VIOLATION
            )
        cid = self._new_id()
        self.customers[cid] = {
            "id": cid,
            "company_id": company_id,
            "name": name,
            "external_id": external_id,
            "city": None,
            "state": None,
        }
        return cid

    # trucks

    def find_truck_by_vin(self, company_id: str, vin: str) -> str | None:
        wanted = vin.upper()
        for tid, t in self.trucks.items():
            if t.get("company_id") == company_id and t.get("vin") == wanted:
                return tid
        return None

    def insert_truck(self, data: Mapping[str, Any]) -> str:
        vin = data.get("vin")
        if not vin:
            raise StoreError('null value in column "vin" violates not-null constraint', code="23502")
        if self.find_truck_by_vin(data.get("company_id"), vin):
            raise StoreError(
                'duplicate key value violates unique constraint "trucks_company_id_vin_key"',
                code=UNIQUE_VIOLATION,
            )
        tid = self._new_id()
        record = copy.deepcopy(dict(data))
        record["id"] = tid
        self.trucks[tid] = record
        return tid

    def update_truck(self, truck_id: str, data: Mapping[str, Any]) -> None:
        if truck_id not in self.trucks:
            raise StoreError(f"truck not found: {truck_id}")
        record = self.trucks[truck_id]
        for column, value in data.items():
            if column in NESTED_COLUMNS:
                record[column] = _merge_nested(record.get(column), value)
            else:
                record[column] = value

    def get_truck(self, company_id: str, vin: str) -> dict[str, Any] | None:
        tid = self.find_truck_by_vin(company_id, vin)
        return self.trucks[tid] if tid else None
