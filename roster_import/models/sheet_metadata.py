from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "SheetMetadata",
]


@dataclass(frozen=True)
class SheetMetadata:
    """Year-level and class-label context shared by every row of one sheet.

    Either field may be empty when no extraction strategy found it.
    """
    year_level: str = ""  # "1".."6" once normalized, pass-through otherwise
    class_label: str = ""

    @property
    def complete(self) -> bool:
        return bool(self.year_level) and bool(self.class_label)

    def merge(self, other: SheetMetadata | None) -> SheetMetadata:
        """Fill only the empty fields of self from other (first value wins)."""
        if other is None:
            return self
        return SheetMetadata(
            year_level=self.year_level or other.year_level,
            class_label=self.class_label or other.class_label,
        )
