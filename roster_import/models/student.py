from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from typing import Any

"""Student domain model.

A Student is the canonical record produced by the roster ingestion pipeline and
kept in the persistent student store. The persisted layout is a flat record
with camelCase keys so the store stays compatible with the records manager's
JSON document (``id, name, icNumber, className, gender, house``).
"""

__all__ = [
    "Student",
    "new_student_id",
    "PLACEHOLDER_GENDER",
    "UNASSIGNED_HOUSE",
    "NO_CLASS",
]

PLACEHOLDER_GENDER = "-"
UNASSIGNED_HOUSE = "-"
NO_CLASS = "TIADA"

# attribute name -> persisted key
_RECORD_KEYS = {
    "id": "id",
    "name": "name",
    "ic_number": "icNumber",
    "class_name": "className",
    "gender": "gender",
    "house": "house",
}


def new_student_id() -> str:
    """Return an opaque unique token for a newly created student."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Student:
    """Canonical student record.

    ``ic_number`` is the natural de-duplication key inside the store: two
    students sharing it are the same person.
    """
    id: str
    name: str  # uppercase, trimmed
    ic_number: str  # digits only
    class_name: str
    gender: str = PLACEHOLDER_GENDER
    house: str = UNASSIGNED_HOUSE

    def to_record(self) -> dict[str, str]:
        return {key: getattr(self, attr) for attr, key in _RECORD_KEYS.items()}

    @staticmethod
    def from_record(record: dict[str, Any]) -> Student:
        """Build a Student from a persisted record.

        Missing keys fall back to empty strings / placeholders so that records
        written by older versions of the app still load.
        """
        return Student(
            id=str(record.get("id") or new_student_id()),
            name=str(record.get("name") or ""),
            ic_number=str(record.get("icNumber") or ""),
            class_name=str(record.get("className") or ""),
            gender=str(record.get("gender") or PLACEHOLDER_GENDER),
            house=str(record.get("house") or UNASSIGNED_HOUSE),
        )

    def with_class(self, class_name: str) -> Student:
        return replace(self, class_name=class_name)

    def with_house(self, house: str) -> Student:
        return replace(self, house=house)
