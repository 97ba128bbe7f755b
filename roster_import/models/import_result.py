from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Result models for roster imports.

MergeResult describes one bulk merge into the student store. FileStat and
ImportResult aggregate a CLI batch run and feed the SUMMARY output line.
"""


@dataclass(frozen=True)
class MergeResult:
    """Outcome of merging one batch of students into the store."""
    added: int  # newly stored students
    duplicates: int  # skipped because the IC number was already known


@dataclass(frozen=True)
class FileStat:
    """Per-file import statistics."""
    file_name: str
    status: str  # success/failed
    ingested: int  # students produced by the pipeline
    added: int  # students actually merged into the store
    elapsed_seconds: float
    error: str | None = None


@dataclass(frozen=True)
class ImportResult:
    """Aggregated results of one import run."""
    success_files: int
    failed_files: int
    total_ingested: int
    total_added: int
    total_duplicates: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float  # ingested / elapsed
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
