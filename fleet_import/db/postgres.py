from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import psycopg2
from psycopg2.extras import Json

from .store import NESTED_COLUMNS, TRUCK_COLUMNS, CustomerRef, StoreError

"""PostgreSQL FleetStore over a psycopg2 cursor.

The connection is expected to run in autocommit: each statement is its own
unit, so one failing row never poisons the rows after it.

Nested truck columns are jsonb. Inserts write them as-is; updates merge the
new keys into the stored document, and into its object-valued keys one level
down, so values the new file does not carry are kept.
"""

__all__ = [
    "PostgresFleetStore",
]


def _check_columns(columns: Sequence[str]) -> None:
    unknown = [c for c in columns if c not in TRUCK_COLUMNS]
    if unknown:
        raise StoreError(f"unknown truck columns: {sorted(unknown)}")


def _adapt(column: str, value: Any) -> Any:
    if column in NESTED_COLUMNS:
        return Json(value or {})
    return value


def _nested_assignment(column: str, value: Mapping[str, Any] | None) -> tuple[str, list[Any]]:
    """SQL merging *value* into a jsonb column, one level below the top too.

    Top-level keys are merged with ``||``; object-valued keys (maintenance.body,
    maintenance.apu, ...) are merged into the stored sub-object with jsonb_set.
    """
    value = value or {}
    flat = {k: v for k, v in value.items() if not isinstance(v, Mapping)}
    expr = f"COALESCE(\"{column}\", '{{}}'::jsonb) || %s::jsonb"
    params: list[Any] = [Json(flat)]
    for key, sub in value.items():
        if not isinstance(sub, Mapping):
            continue
        expr = (
            f"jsonb_set({expr}, %s::text[], "
            f"COALESCE(\"{column}\" -> %s, '{{}}'::jsonb) || %s::jsonb)"
        )
        params.extend([[key], key, Json(dict(sub))])
    return f'"{column}" = {expr}', params


class PostgresFleetStore:
    """FleetStore backed by the customers / trucks tables."""

    def __init__(self, cursor: Any) -> None:
        self.cursor = cursor

    def _execute(self, query: str, params: Sequence[Any]) -> None:
        try:
            self.cursor.execute(query, params)
        except psycopg2.Error as e:
            raise StoreError(str(e).strip(), code=getattr(e, "pgcode", None)) from e

    def _fetchone(self) -> tuple[Any, ...] | None:
        try:
            return self.cursor.fetchone()
        except psycopg2.Error as e:  # pragma: no cover
            raise StoreError(f"failed fetching row: {e}", code=getattr(e, "pgcode", None)) from e

    # customers

    def find_customer_by_external_id(self, company_id: str, external_id: str) -> CustomerRef | None:
        self._execute(
            "SELECT id, external_id FROM customers WHERE company_id = %s AND external_id = %s LIMIT 1",
            (company_id, external_id),
        )
        row = self._fetchone()
        return CustomerRef(id=str(row[0]), external_id=row[1]) if row else None

    def find_customer_by_name(self, company_id: str, name: str) -> CustomerRef | None:
        # first by id when a company has duplicate names
        self._execute(
            "SELECT id, external_id FROM customers "
            "WHERE company_id = %s AND lower(name) = lower(%s) "
            "ORDER BY id LIMIT 1",
            (company_id, name),
        )
        row = self._fetchone()
        return CustomerRef(id=str(row[0]), external_id=row[1]) if row else None

    def set_customer_external_id(self, customer_id: str, external_id: str) -> None:
        self._execute(
            "UPDATE customers SET external_id = %s WHERE id = %s",
            (external_id, customer_id),
        )

    def insert_customer(self, company_id: str, name: str, external_id: str | None) -> str:
        self._execute(
            "INSERT INTO customers (company_id, name, external_id) VALUES (%s, %s, %s) RETURNING id",
            (company_id, name, external_id),
        )
        row = self._fetchone()
        if not row:
            raise StoreError("customer insert returned no id")
        return str(row[0])

    # trucks

    def find_truck_by_vin(self, company_id: str, vin: str) -> str | None:
        self._execute(
            "SELECT id FROM trucks WHERE company_id = %s AND vin = %s LIMIT 1",
            (company_id, vin.upper()),
        )
        row = self._fetchone()
        return str(row[0]) if row else None

    def insert_truck(self, data: Mapping[str, Any]) -> str:
        columns = list(data.keys())
        _check_columns(columns)
        cols_sql = ",".join(f'"{c}"' for c in columns)
        placeholders = ",".join("%s" for _ in columns)
        self._execute(
            f"INSERT INTO trucks ({cols_sql}) VALUES ({placeholders}) RETURNING id",
            [_adapt(c, data[c]) for c in columns],
        )
        row = self._fetchone()
        if not row:
            raise StoreError("truck insert returned no id")
        return str(row[0])

    def update_truck(self, truck_id: str, data: Mapping[str, Any]) -> None:
        columns = list(data.keys())
        if not columns:
            return
        _check_columns(columns)
        assignments: list[str] = []
        params: list[Any] = []
        for c in columns:
            if c in NESTED_COLUMNS:
                sql, nested_params = _nested_assignment(c, data[c])
                assignments.append(sql)
                params.extend(nested_params)
            else:
                assignments.append(f'"{c}" = %s')
                params.append(data[c])
        params.append(truck_id)
        self._execute(
            f"UPDATE trucks SET {', '.join(assignments)} WHERE id = %s",
            params,
        )
