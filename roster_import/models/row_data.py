from __future__ import annotations

from dataclasses import dataclass

"""Row-level models for roster normalization.

NormalizedRow is a row that yielded both a name and an IC number. RowRejection
records why a row was dropped; rejections are never raised, they only feed the
optional skipped-row audit log.
"""

__all__ = [
    "NormalizedRow",
    "RowRejection",
    "REASON_NO_NAME",
    "REASON_NO_IC",
    "REASON_SHORT_IC",
]

REASON_NO_NAME = "NO_NAME"
REASON_NO_IC = "NO_IC"
REASON_SHORT_IC = "SHORT_IC"


@dataclass(frozen=True)
class NormalizedRow:
    """One accepted roster row."""
    row_number: int  # 1-based sheet row number
    name: str  # uppercased
    ic_number: str  # digits only, >= 10 digits


@dataclass(frozen=True)
class RowRejection:
    """A dropped row and the first acceptance test it failed."""
    row_number: int
    reason: str  # UPPER_SNAKE
