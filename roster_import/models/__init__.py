"""Domain models for the roster importer.

This package contains the model classes used throughout the application:
configuration, students, per-sheet metadata, per-row results and run results.
"""

from .config_models import ImportConfig, IngestConfig, StoreConfig
from .import_result import FileStat, ImportResult, MergeResult
from .row_data import NormalizedRow, RowRejection
from .sheet_metadata import SheetMetadata
from .skip_record import SkipRecord
from .student import Student

__all__ = [
    # Configuration models
    "ImportConfig",
    "IngestConfig",
    "StoreConfig",
    # Processing models
    "NormalizedRow",
    "RowRejection",
    "SheetMetadata",
    "SkipRecord",
    "Student",
    # Results
    "FileStat",
    "ImportResult",
    "MergeResult",
]
