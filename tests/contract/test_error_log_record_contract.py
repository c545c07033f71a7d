from __future__ import annotations

import json

import jsonschema
import pytest
from jsonschema.exceptions import ValidationError

from fleet_import.models.error_record import ErrorRecord

"""Error log record contract: one JSON object per line, fixed keys."""

ERROR_LOG_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "required": ["timestamp", "file", "row", "action", "message"],
    "properties": {
        "timestamp": {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$"},
        "file": {"type": "string"},
        "row": {"type": "integer", "minimum": -1},
        "action": {
            "enum": ["skipped", "insert_failed", "update_failed", "error"],
        },
        "message": {"type": "string"},
    },
}


def test_created_record_matches_schema():
    rec = ErrorRecord.create("fleet.csv", 5, "insert_failed", 'null value in column "vin"')
    jsonschema.validate(json.loads(rec.to_json_line()), ERROR_LOG_SCHEMA)


def test_schema_rejects_extra_key():
    record = {
        "timestamp": "2025-09-26T10:12:33Z",
        "file": "fleet.csv",
        "row": 2,
        "action": "skipped",
        "message": "Duplicate VIN",
        "extra": "not allowed",
    }
    with pytest.raises(ValidationError):
        jsonschema.validate(record, ERROR_LOG_SCHEMA)


def test_unknown_row_is_minus_one():
    rec = ErrorRecord.create("fleet.csv", -1, "error", "connection lost")
    jsonschema.validate(json.loads(rec.to_json_line()), ERROR_LOG_SCHEMA)
