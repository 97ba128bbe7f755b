from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""SkipRecord model for the skipped-row audit log.

Row rejection is silent by default. When auditing is switched on, every dropped
row is written as one JSON Lines record so an operator can see which rows of a
roster were ignored and why. The record keys are fixed: no extra keys are ever
emitted.
"""

__all__ = [
    "SkipRecord",
]


@dataclass(frozen=True)
class SkipRecord:
    """Structured record of a dropped roster row.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Roster file name being ingested
        row: Row number (1-based). Use -1 for file-level entries
        reason: Rejection reason in UPPER_SNAKE_CASE format
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int  # 行番号。不明な場合 -1 許容
    reason: str  # UPPER_SNAKE

    @staticmethod
    def create(file: str, row: int, reason: str) -> SkipRecord:
        """Create a new SkipRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return SkipRecord(timestamp=ts, file=file, row=row, reason=reason)

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
