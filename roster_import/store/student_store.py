from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..models.import_result import MergeResult
from ..models.student import NO_CLASS, Student

"""Persistent student store.

Students live in a JSON document next to the records manager's other
collections (activities, takwim, sports, houses):

    {"<key>": {"students": [...], "activities": [...], ...}}

Only the ``students`` collection is owned here; every other collection in the
document is carried over untouched on save. The store is a single in-process
collection and the merge step is its only bulk writer.
"""

__all__ = [
    "StoreError",
    "StudentStore",
    "class_registry",
    "natural_sort_key",
]

logger = logging.getLogger(__name__)

STUDENTS_COLLECTION = "students"

_HIDDEN_CLASSES = {"", "-"}
_DIGITS_RE = re.compile(r"(\d+)")


class StoreError(Exception):
    """Raised when the store document cannot be read or written."""


def natural_sort_key(text: str) -> list[Any]:
    """Sort key that orders "TAHUN 2" before "TAHUN 10"."""
    return [int(part) if part.isdigit() else part.lower() for part in _DIGITS_RE.split(text)]


def class_registry(students: Iterable[Student]) -> list[str]:
    """Distinct class names in first-seen order."""
    return list(dict.fromkeys(s.class_name for s in students if s.class_name))


class StudentStore:
    """Flat list of students persisted under a named key of a JSON document."""

    def __init__(self, path: Path, key: str = "rak_skeme") -> None:
        self.path = path
        self.key = key
        self._students: list[Student] = []
        self._document: dict[str, Any] = {}

    # ------------------------------------------------------------------ io
    def load(self) -> StudentStore:
        """Load the document from disk. A missing file means an empty store."""
        if not self.path.exists():
            self._document = {}
            self._students = []
            return self
        try:
            document = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            raise StoreError(f"invalid store document {self.path}: {e}") from e
        except OSError as e:
            raise StoreError(f"cannot read store {self.path}: {e}") from e
        if not isinstance(document, dict):
            raise StoreError(f"store document {self.path} must be a JSON object")
        section = document.get(self.key) or {}
        if not isinstance(section, dict):
            raise StoreError(f"store key '{self.key}' must hold a JSON object")
        records = section.get(STUDENTS_COLLECTION) or []
        self._document = document
        self._students = [Student.from_record(r) for r in records if isinstance(r, dict)]
        logger.debug("store loaded path=%s students=%d", self.path, len(self._students))
        return self

    def save(self) -> Path:
        section = dict(self._document.get(self.key) or {})
        section[STUDENTS_COLLECTION] = [s.to_record() for s in self._students]
        document = dict(self._document)
        document[self.key] = section
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as e:
            raise StoreError(f"cannot write store {self.path}: {e}") from e
        self._document = document
        return self.path

    # ------------------------------------------------------------- queries
    @property
    def students(self) -> list[Student]:
        return list(self._students)

    def __len__(self) -> int:
        return len(self._students)

    def find_by_ic(self, ic_number: str) -> Student | None:
        for s in self._students:
            if s.ic_number == ic_number:
                return s
        return None

    def class_registry(self) -> list[str]:
        return class_registry(self._students)

    def sorted_classes(self) -> list[str]:
        """Class names for display: blanks and "-" hidden, natural order."""
        names = {c.strip() for c in self.class_registry()} - _HIDDEN_CLASSES
        return sorted(names, key=natural_sort_key)

    def students_by_house(self, house: str) -> list[Student]:
        wanted = house.upper()
        return [s for s in self._students if s.house.upper() == wanted]

    # ----------------------------------------------------------- mutations
    def _sort(self) -> None:
        self._students.sort(key=lambda s: (s.class_name, s.name))

    def merge_students(self, batch: Iterable[Student]) -> MergeResult:
        """Merge an ingested batch, skipping IC numbers already present.

        Repeats of one IC inside the batch are skipped too, so merging the
        same batch twice leaves the store unchanged. The new list is only
        swapped in after the whole batch has been examined.
        """
        known = {s.ic_number for s in self._students if s.ic_number}
        merged = list(self._students)
        added = 0
        duplicates = 0
        for student in batch:
            if not student.name:
                continue
            if student.ic_number and student.ic_number in known:
                duplicates += 1
                continue
            merged.append(student)
            if student.ic_number:
                known.add(student.ic_number)
            added += 1
        if added:
            self._students = merged
            self._sort()
        return MergeResult(added=added, duplicates=duplicates)

    def add_student(self, student: Student) -> bool:
        """Manual entry. Rejected when the IC or the same name+class exists."""
        for existing in self._students:
            if student.ic_number and existing.ic_number == student.ic_number:
                return False
            if (
                existing.name.upper() == student.name.upper()
                and existing.class_name == student.class_name
            ):
                return False
        self._students.append(student)
        self._sort()
        return True

    def delete_student(self, student_id: str) -> bool:
        before = len(self._students)
        self._students = [s for s in self._students if s.id != student_id]
        return len(self._students) != before

    def rename_class(self, old_name: str, new_name: str) -> int:
        """Move every student of old_name to new_name. Returns students changed."""
        new_name = new_name.upper().strip()
        changed = 0
        updated: list[Student] = []
        for s in self._students:
            if s.class_name == old_name:
                updated.append(s.with_class(new_name))
                changed += 1
            else:
                updated.append(s)
        if changed:
            self._students = updated
            self._sort()
        return changed

    def delete_class(self, name: str) -> int:
        """Drop a class label; its students are kept under NO_CLASS."""
        return self.rename_class(name, NO_CLASS)

    def bulk_update_house(self, student_ids: Iterable[str], house: str) -> int:
        ids = set(student_ids)
        house = house.upper()
        changed = 0
        updated: list[Student] = []
        for s in self._students:
            if s.id in ids:
                updated.append(s.with_house(house))
                changed += 1
            else:
                updated.append(s)
        self._students = updated
        return changed
