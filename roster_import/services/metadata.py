from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..models.config_models import DEFAULT_CLASS_KEYWORDS, DEFAULT_HEADER_SCAN_ROWS
from ..models.sheet_metadata import SheetMetadata

"""Sheet-level metadata extraction (year level + class label).

Rosters usually state the class once, either in the file name or in a title
row, and omit it from the data rows. The extractor runs an ordered list of
strategies; for each field the first strategy that yields a non-empty value
wins:

1. file name pattern ``TAHUN <digit|ordinal> <label>``
2. header scan of the first rows for ``TAHUN <digits>`` / ``KELAS <label>``
3. known class keyword found in the file name (label only)
"""

__all__ = [
    "ORDINAL_WORDS",
    "MetadataContext",
    "extract_sheet_metadata",
    "normalize_year_level",
    "from_file_name",
    "from_header_rows",
    "from_class_keyword",
    "STRATEGIES",
]

ORDINAL_WORDS: dict[str, str] = {
    "SATU": "1",
    "DUA": "2",
    "TIGA": "3",
    "EMPAT": "4",
    "LIMA": "5",
    "ENAM": "6",
}

_ORDINAL_ALT = "|".join(ORDINAL_WORDS)
_FILENAME_RE = re.compile(rf"TAHUN\s*(\d+|{_ORDINAL_ALT})\s*([A-Z]+)")
_HEADER_YEAR_RE = re.compile(r"TAHUN\s*:?\s*(\d+)")
_HEADER_CLASS_RE = re.compile(r"KELAS\s*:?\s*([A-Z][A-Z ]*)")

ROW_JOINER = " | "


@dataclass(frozen=True)
class MetadataContext:
    """Inputs every extraction strategy may look at."""
    file_name: str
    rows: Sequence[Sequence[str]]
    header_scan_rows: int = DEFAULT_HEADER_SCAN_ROWS
    class_keywords: Sequence[str] = DEFAULT_CLASS_KEYWORDS

    @property
    def file_stem(self) -> str:
        """Uppercased file name without extension, underscores read as spaces."""
        return Path(self.file_name).stem.upper().replace("_", " ")


def normalize_year_level(token: str) -> str:
    """Map Malay ordinal words to digits; pass anything else through uppercased."""
    cleaned = (token or "").upper().strip()
    return ORDINAL_WORDS.get(cleaned, cleaned)


def from_file_name(ctx: MetadataContext) -> SheetMetadata | None:
    m = _FILENAME_RE.search(ctx.file_stem)
    if not m:
        return None
    return SheetMetadata(year_level=normalize_year_level(m.group(1)), class_label=m.group(2).strip())


def from_header_rows(ctx: MetadataContext) -> SheetMetadata | None:
    """Scan the first rows for explicit TAHUN / KELAS text.

    Each field is taken from the first row mentioning it; the two fields are
    searched independently.
    """
    year = ""
    label = ""
    for row in ctx.rows[: ctx.header_scan_rows]:
        text = ROW_JOINER.join(str(c) for c in row).upper()
        if not year:
            m = _HEADER_YEAR_RE.search(text)
            if m:
                year = normalize_year_level(m.group(1))
        if not label:
            m = _HEADER_CLASS_RE.search(text)
            if m:
                label = m.group(1).strip()
        if year and label:
            break
    if not year and not label:
        return None
    return SheetMetadata(year_level=year, class_label=label)


def from_class_keyword(ctx: MetadataContext) -> SheetMetadata | None:
    stem = ctx.file_stem
    for keyword in ctx.class_keywords:
        if keyword.upper() in stem:
            return SheetMetadata(class_label=keyword.upper())
    return None


Strategy = Callable[[MetadataContext], "SheetMetadata | None"]

# 順序がそのまま優先順位
STRATEGIES: tuple[Strategy, ...] = (
    from_file_name,
    from_header_rows,
    from_class_keyword,
)


def extract_sheet_metadata(
    ctx: MetadataContext, strategies: Sequence[Strategy] = STRATEGIES
) -> SheetMetadata:
    """Run the strategies in order, keeping the first value found per field."""
    result = SheetMetadata()
    for strategy in strategies:
        if result.complete:
            break
        result = result.merge(strategy(ctx))
    return result
