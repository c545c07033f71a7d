from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the per-import JSON Lines error log.

Every row-level failure is logged here, including the ones beyond the
display cap of the import result.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Source file name (or "<preview>" for edited preview rows)
        row: 1-based source row number. -1 when the error is not tied to a row
        action: Row outcome, e.g. skipped / insert_failed / update_failed / error
        message: Human readable reason (database message for store failures)
    """
    timestamp: str
    file: str
    row: int
    action: str
    message: str

    @staticmethod
    def create(file: str, row: int, action: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(timestamp=ts, file=file, row=row, action=action, message=message)

    def to_json_line(self) -> str:
        """Serialize without extra keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
