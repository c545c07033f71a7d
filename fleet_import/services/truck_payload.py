from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..mapping.values import parse_date, parse_int

"""Canonical row -> trucks record.

Structured subsystems are nested objects holding only the keys that have a
value. An empty cell is omitted rather than written as null, so an update
from a sparser file does not erase what an earlier import stored.
"""

__all__ = [
    "build_nested",
    "map_row_to_truck_data",
]


def build_nested(values: Mapping[str, Any]) -> dict[str, Any]:
    """Drop None / "" / {} entries."""
    return {k: v for k, v in values.items() if v is not None and v != "" and v != {}}


def _text(row: Mapping[str, str], field_name: str) -> str | None:
    value = (row.get(field_name) or "").strip()
    return value or None


def _section(row: Mapping[str, str], keys: Mapping[str, str]) -> dict[str, Any] | None:
    """Sub-object of maintenance, None when none of its source fields is set."""
    section = build_nested({key: _text(row, src) for key, src in keys.items()})
    return section or None


def map_row_to_truck_data(
    row: Mapping[str, str],
    company_id: str,
    customer_id: str | None,
) -> dict[str, Any]:
    """Build the full trucks record for insert (or, minus identity, update)."""
    vin = _text(row, "vin")
    truck_number = _text(row, "truck_number")

    return {
        "company_id": company_id,
        "customer_id": customer_id,
        "vin": vin.upper() if vin else None,
        "unit_id": truck_number,
        "truck_number": truck_number,
        "year": parse_int(row.get("year")),
        "make": _text(row, "make"),
        "model": _text(row, "model"),
        "vehicle_class": _text(row, "vehicle_class"),
        "body_type": _text(row, "body_type"),
        "odometer_miles": parse_int(row.get("odometer")),
        "engine_hours": parse_int(row.get("engine_hours")),
        "license_plate": _text(row, "license_plate"),
        "fleet_assignment": _text(row, "fleet_assignment"),
        "customer_name": _text(row, "customer_name"),
        "notes": _text(row, "notes"),
        "in_service_date": parse_date(row.get("in_service_date")),
        "engine": build_nested({
            "manufacturer": _text(row, "engine_manufacturer"),
            "model": _text(row, "engine_model"),
            "serial_number": _text(row, "engine_serial"),
            "horsepower": parse_int(row.get("engine_horsepower")),
            "fuel_type": _text(row, "fuel_type"),
            "key_code": _text(row, "key_code"),
        }),
        "transmission": build_nested({
            "manufacturer": _text(row, "transmission_manufacturer"),
            "model": _text(row, "transmission_model"),
            "type": _text(row, "transmission_type"),
            "speeds": parse_int(row.get("transmission_speeds")),
            "serial_number": _text(row, "transmission_serial"),
        }),
        "drivetrain": build_nested({
            "rear_axle_manufacturer": _text(row, "rear_axle_manufacturer"),
            "rear_axle_ratio": _text(row, "rear_axle_ratio"),
            "rear_axle_type": _text(row, "rear_axle_type"),
            "front_axle_model": _text(row, "front_axle_model"),
            "front_axle_serial": _text(row, "front_axle_serial"),
            "fifth_wheel_model": _text(row, "fifth_wheel_model"),
            "fifth_wheel_serial": _text(row, "fifth_wheel_serial"),
        }),
        "emissions": build_nested({
            "standard": _text(row, "emission_standard"),
        }),
        "braking": build_nested({
            "brake_type": _text(row, "brake_type"),
            "air_drier": _text(row, "air_drier"),
        }),
        "fuel_system": build_nested({
            "tank_size": _text(row, "fuel_tank_size"),
        }),
        "maintenance": build_nested({
            "body": _section(row, {
                "manufacturer": "body_manufacturer",
                "model": "body_model",
                "serial_number": "body_serial",
                "length": "body_length",
                "rear_door_type": "rear_door_type",
            }),
            "liftgate": _section(row, {
                "manufacturer": "liftgate_manufacturer",
                "model": "liftgate_model",
                "serial_number": "liftgate_serial",
            }),
            "apu": _section(row, {
                "manufacturer": "apu_manufacturer",
                "model": "apu_model",
                "serial_number": "apu_serial",
            }),
            "reefer": _section(row, {
                "manufacturer": "reefer_manufacturer",
            }),
            "vehicle_height": _text(row, "vehicle_height"),
            "location_code": _text(row, "location_code"),
            "location_description": _text(row, "location_description"),
            "equipment_pool": _text(row, "equipment_pool"),
            "customer_unit_number": _text(row, "customer_unit_number"),
        }),
        "electrical": {},
        "electronics": {},
        "cooling": {},
    }
