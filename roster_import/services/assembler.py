from __future__ import annotations

from collections.abc import Callable, Iterable

from ..models.row_data import NormalizedRow
from ..models.student import PLACEHOLDER_GENDER, UNASSIGNED_HOUSE, Student, new_student_id


def assemble_students(
    rows: Iterable[NormalizedRow],
    class_for_row: Callable[[NormalizedRow], str],
    gender: str = PLACEHOLDER_GENDER,
    house: str = UNASSIGNED_HOUSE,
) -> list[Student]:
    """Build one Student per accepted row, in row order.

    Duplicates are not suppressed here; the store merge is idempotent by IC
    number instead.
    """
    return [
        Student(
            id=new_student_id(),
            name=row.name,
            ic_number=row.ic_number,
            class_name=class_for_row(row),
            gender=gender,
            house=house,
        )
        for row in rows
    ]
