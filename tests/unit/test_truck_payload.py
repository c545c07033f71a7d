from __future__ import annotations

from fleet_import.db.store import NESTED_COLUMNS, TRUCK_COLUMNS
from fleet_import.services.truck_payload import build_nested, map_row_to_truck_data


def test_build_nested_drops_empty_values():
    assert build_nested({"a": "x", "b": "", "c": None, "d": {}, "e": 0}) == {"a": "x", "e": 0}


def test_full_record():
    row = {
        "vin": "1fujgldr9plbx1236",
        "truck_number": "FB-001",
        "year": "2022",
        "make": "Freightliner",
        "model": "Cascadia",
        "odometer": "125,000",
        "in_service_date": "3/1/2022",
        "engine_manufacturer": "Cummins",
        "engine_model": "",
        "engine_horsepower": "450",
        "transmission_type": "Automatic",
        "transmission_speeds": "12",
        "rear_axle_ratio": "3.42",
        "liftgate_model": "Waltco",
        "location_code": "DAL",
    }
    data = map_row_to_truck_data(row, "company-1", "cust-1")

    assert data["company_id"] == "company-1"
    assert data["customer_id"] == "cust-1"
    assert data["vin"] == "1FUJGLDR9PLBX1236"
    assert data["unit_id"] == "FB-001"
    assert data["truck_number"] == "FB-001"
    assert data["year"] == 2022
    assert data["odometer_miles"] == 125000
    assert data["in_service_date"] == "2022-03-01"
    assert data["engine"] == {"manufacturer": "Cummins", "horsepower": 450}
    assert data["transmission"] == {"type": "Automatic", "speeds": 12}
    assert data["drivetrain"] == {"rear_axle_ratio": "3.42"}
    assert data["maintenance"] == {"liftgate": {"model": "Waltco"}, "location_code": "DAL"}
    assert data["emissions"] == {}
    assert data["electrical"] == {} and data["electronics"] == {} and data["cooling"] == {}
    assert set(data) <= TRUCK_COLUMNS
    assert all(c in data for c in NESTED_COLUMNS)


def test_missing_values_are_none_not_empty_strings():
    data = map_row_to_truck_data({"truck_number": "U-1"}, "company-1", None)
    assert data["vin"] is None
    assert data["make"] is None
    assert data["year"] is None
    assert data["customer_id"] is None
    assert data["maintenance"] == {}
