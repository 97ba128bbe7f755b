from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from roster_import.models.row_data import RowRejection
from roster_import.models.skip_record import SkipRecord

"""Skipped-row audit log.

Row rejection stays silent for the caller; this buffer is the optional
diagnostic trail behind it:
- JSON Lines with a fixed schema (no extra keys)
- one `logs/skipped-YYYYMMDD-HHMMSS.log` (UTC) per run, created on first flush
- records buffered in memory and written in one go on flush()
"""

__all__ = [
    "SkipRecord",
    "SkipLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class SkipLogBuffer:
    """In-memory buffer for skip records. Flush appends JSON Lines.

    シリアル実行前提のためスレッド安全性は不要。
    """
    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[SkipRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir or LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"skipped-{stamp}.log"
        return self._file_path

    def append(self, record: SkipRecord) -> None:
        self._records.append(record)

    def record_rejection(self, file_name: str, rejection: RowRejection) -> None:
        self.append(SkipRecord.create(file_name, rejection.row_number, rejection.reason))

    @property
    def records(self) -> list[SkipRecord]:
        return list(self._records)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
