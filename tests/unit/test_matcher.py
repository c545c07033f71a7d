from __future__ import annotations

import pytest

from fleet_import.mapping.aliases import COLUMN_ALIASES
from fleet_import.mapping.matcher import (
    create_column_mapping,
    map_column_to_field,
    transform_row,
    validate_column_mapping,
)
from fleet_import.mapping.normalizer import normalize_header


def _first_owner() -> dict[str, str]:
    owners: dict[str, str] = {}
    for field_name, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            owners.setdefault(alias, field_name)
    return owners


def test_every_normalized_alias_maps_to_its_first_owner():
    owners = _first_owner()
    checked = 0
    for alias, owner in owners.items():
        # aliases with separators or '#' are matched through their normalized form
        if normalize_header(alias) != alias:
            continue
        assert map_column_to_field(alias) == owner, alias
        checked += 1
    assert checked > 100


@pytest.mark.parametrize(
    "header,expected",
    [
        ("VIN", "vin"),
        ("Unit #", "truck_number"),
        ("Truck_No", "truck_number"),
        ("EN - Value", "engine_manufacturer"),
        ("TRA Value", "transmission_manufacturer"),
        ("BL", "body_length"),
        ("Current Mileage", "odometer"),
        ("Customer Unit Number", "customer_unit_number"),
        ("customer_number", "customer_number"),
    ],
)
def test_known_headers(header, expected):
    assert map_column_to_field(header) == expected


def test_exact_match_beats_substring():
    # "model" is contained in "engine model" but the exact alias wins
    assert map_column_to_field("Engine Model") == "engine_model"


def test_substring_match_for_long_alias():
    assert map_column_to_field("Truck Make (OEM)") == "make"


@pytest.mark.parametrize("header", ["Table", "Visible", "Xyzzy", "", None])
def test_short_codes_never_match_inside_words(header):
    assert map_column_to_field(header) is None


def test_first_column_wins_for_duplicate_field():
    mapping = create_column_mapping(["VIN", "Serial Number", "Make"])
    assert dict(mapping.index_to_field) == {0: "vin", 2: "make"}
    assert mapping.ignored_headers() == ["Serial Number"]
    assert mapping.header_to_field() == {"VIN": "vin", "Make": "make"}
    assert mapping.fields == ["vin", "make"]
    assert len(mapping) == 2


def test_mapping_is_immutable():
    mapping = create_column_mapping(["VIN"])
    with pytest.raises(TypeError):
        mapping.index_to_field[1] = "make"  # type: ignore[index]


def test_transform_row_trims_and_strips_one_quote_layer():
    mapping = create_column_mapping(["VIN", "Make", "Model"])
    row = transform_row(['  "1FUJGLDR9PLBX1236" ', '""Mack""'], mapping)
    assert row == {"vin": "1FUJGLDR9PLBX1236", "make": '"Mack"', "model": ""}


def test_header_order_independence():
    headers = ["VIN", "Make", "Unit Number", "Year"]
    cells = ["1FUJGLDR9PLBX1236", "Volvo", "U-7", "2020"]
    order = [2, 0, 3, 1]

    a = create_column_mapping(headers)
    b = create_column_mapping([headers[i] for i in order])

    assert sorted(a.fields) == sorted(b.fields)
    assert transform_row(cells, a) == transform_row([cells[i] for i in order], b)


def test_validate_requires_identity_column():
    result = validate_column_mapping(create_column_mapping(["Make", "Model", "Year"]))
    assert not result.is_valid
    assert result.missing_fields == ["VIN or Truck Number"]
    assert result.warnings == []


def test_validate_warns_on_missing_recommended_fields():
    result = validate_column_mapping(create_column_mapping(["Unit Number", "Make"]))
    assert result.is_valid
    assert result.missing_fields == []
    assert result.warnings == [
        "Model column not found - will be empty",
        "Year column not found - will be empty",
    ]
    assert result.mapped_fields == ["truck_number", "make"]
