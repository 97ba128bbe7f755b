from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the roster importer.

These are the typed, defaults-applied views the pipeline works with. The YAML
loader in roster_import/config/loader.py builds them after schema validation.
"""

DEFAULT_HEADER_SCAN_ROWS = 15

# Gemstone / flower class names used by the school.
DEFAULT_CLASS_KEYWORDS: tuple[str, ...] = (
    "NILAM",
    "AKID",
    "INTAN",
    "DELIMA",
    "MAWAR",
    "ZAMRUD",
    "ANGGERIK",
)

# IC birth-year prefix -> year level. Only valid for the academic year it was
# written for; override in config/import.yml when the calendar moves on.
DEFAULT_IC_YEAR_PREFIXES: dict[str, str] = {
    "15": "4",
    "14": "5",
    "13": "6",
}


@dataclass(frozen=True)
class StoreConfig:
    """Location of the persistent JSON document holding the student store."""
    path: str  # JSON document path
    key: str = "rak_skeme"  # named key the collections live under


@dataclass(frozen=True)
class IngestConfig:
    """Heuristic knobs for the ingestion pipeline."""
    header_scan_rows: int = DEFAULT_HEADER_SCAN_ROWS
    class_keywords: tuple[str, ...] = DEFAULT_CLASS_KEYWORDS
    ic_year_prefixes: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_IC_YEAR_PREFIXES))
    placeholder_gender: str = "-"
    placeholder_house: str = "-"
    audit_skipped_rows: bool = False  # 既定は無音 (silent row rejection)


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for the importer."""
    source_directory: str  # Directory scanned for roster files
    store: StoreConfig
    ingest: IngestConfig = field(default_factory=IngestConfig)
