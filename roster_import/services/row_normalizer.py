from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from decimal import Decimal, InvalidOperation

from ..models.row_data import (
    REASON_NO_IC,
    REASON_NO_NAME,
    REASON_SHORT_IC,
    NormalizedRow,
    RowRejection,
)

"""Per-row name / IC number extraction.

Roster layouts vary from school export to school export, so columns are not
looked up by header. Instead every cell of a row is inspected left to right:
the first IC-shaped value is the IC number and the first name-shaped value is
the name. Rows lacking either are dropped silently; header rows, blank rows
and merged-cell leftovers are expected to fail here.
"""

__all__ = [
    "IC_PATTERN",
    "NAME_STOPLIST",
    "MIN_IC_DIGITS",
    "recover_scientific",
    "extract_ic",
    "extract_name",
    "normalize_row",
    "infer_year_from_ic",
]

IC_PATTERN = re.compile(r"\d{6}-\d{2}-\d{4}|\d{12}")
NAME_STOPLIST = frozenset({"BIL", "NAMA", "IC", "KELAS"})
MIN_IC_DIGITS = 10
MIN_NAME_LENGTH = 4
MAX_RECOVERED_DIGITS = 20


def recover_scientific(text: str) -> str:
    """Undo spreadsheet scientific notation on long digit strings.

    ``"1.50101011234E+11"`` -> ``"150101011234"``. Text without ``E+`` or that
    does not parse as a number is returned unchanged.
    """
    if "E+" not in text.upper():
        return text
    try:
        value = Decimal(text.strip())
    except (InvalidOperation, ValueError):
        return text
    # IC numbers have 12 digits; huge exponents would build giant integers
    if not value.is_finite() or value.adjusted() >= MAX_RECOVERED_DIGITS:
        return text
    return str(int(value))


def extract_ic(cells: Sequence[str]) -> str:
    """Return the first IC number found in the row (dashes stripped), or ""."""
    for cell in cells:
        text = recover_scientific(str(cell))
        m = IC_PATTERN.search(text)
        if m:
            return m.group(0).replace("-", "")
    return ""


def extract_name(cells: Sequence[str]) -> str:
    """Return the first name-shaped cell, uppercased, or ""."""
    for cell in cells:
        text = str(cell).strip()
        if len(text) < MIN_NAME_LENGTH:
            continue
        if text[0].isdigit():
            continue
        if ":" in text:  # time-like values
            continue
        if text.upper() in NAME_STOPLIST:
            continue
        return text.upper()
    return ""


def normalize_row(cells: Sequence[str], row_number: int) -> NormalizedRow | RowRejection:
    name = extract_name(cells)
    if not name:
        return RowRejection(row_number=row_number, reason=REASON_NO_NAME)
    ic = extract_ic(cells)
    if not ic:
        return RowRejection(row_number=row_number, reason=REASON_NO_IC)
    if len(ic) < MIN_IC_DIGITS or not ic.isdigit():
        return RowRejection(row_number=row_number, reason=REASON_SHORT_IC)
    return NormalizedRow(row_number=row_number, name=name, ic_number=ic)


def infer_year_from_ic(ic_number: str, prefix_map: Mapping[str, str]) -> str:
    """Guess the year level from the IC birth-year prefix ("" when unknown)."""
    return prefix_map.get(ic_number[:2], "") if len(ic_number) >= 2 else ""
