from __future__ import annotations

from pathlib import Path

"""Downloadable CSV template with the recommended column set."""

__all__ = [
    "TEMPLATE_CSV",
    "TEMPLATE_FILENAME",
    "write_template",
]

TEMPLATE_FILENAME = "truck_import_template.csv"

TEMPLATE_CSV = (
    "vin,year,make,model,truck_number,license_plate,fleet_assignment,"
    "engine_manufacturer,engine_model,engine_serial,engine_horsepower,"
    "transmission_manufacturer,transmission_model,transmission_type,"
    "rear_axle_ratio,emission_standard,current_mileage,customer_name,notes\n"
    "1FUJGLDR9PLBX1236,2022,Freightliner,Cascadia,FB-001,ABC123,Fleet A,"
    "Cummins,ISX15,12345678,450,Eaton,UltraShift PLUS,Automatic,3.42,"
    "EPA 2017,125000,Airoldi Brothers,Well maintained\n"
    "1FUJGLDR9PLBX1237,2021,International,LT625,FB-002,DEF456,Fleet B,"
    "Detroit,DD15,87654321,500,Allison,4000 Series,Automatic,3.73,"
    "EPA 2017,98000,Airoldi Brothers,New DPF installed\n"
)


def write_template(path: Path) -> Path:
    """Write the template; a directory target gets the default file name."""
    if path.is_dir():
        path = path / TEMPLATE_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(TEMPLATE_CSV, encoding="utf-8")
    return path
