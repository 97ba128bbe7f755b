from __future__ import annotations

from collections.abc import Iterable, Sequence

"""Class name resolution against the live class registry.

An extracted (year, label) pair is mapped onto an existing class whenever
possible so the class list does not fragment into near-duplicates such as
"TAHUN 4 INTAN" / "4 INTAN" / "T4 INTAN". Stages, first hit wins:

1. full match   - existing class contains the label and a year indicator
2. year match   - existing class contains a year indicator
3. synthesis    - "TAHUN <year> <label>"

Resolution never fails; degenerate inputs synthesize degenerate names.
"""

__all__ = [
    "ClassResolver",
    "year_indicators",
    "resolve_class",
    "synthesize_class_name",
]

# Alternate spellings seen in existing class names.
_YEAR_WORDS = {
    "4": "EMPAT",
    "5": "LIMA",
    "6": "ENAM",
}


def year_indicators(year: str) -> tuple[str, ...]:
    year = (year or "").strip().upper()
    if not year:
        return ()
    word = _YEAR_WORDS.get(year)
    return (year, word) if word else (year,)


def synthesize_class_name(year: str, label: str) -> str:
    return ("TAHUN " + (year or "") + " " + (label or "")).strip()


def resolve_class(year: str, label: str, registry: Iterable[str]) -> str:
    """Resolve (year, label) to one class name.

    ``registry`` is iterated in its natural order; the first class satisfying
    a stage is returned.
    """
    indicators = year_indicators(year)
    label_up = (label or "").strip().upper()
    classes = [c for c in registry if c]

    if indicators:
        for cls in classes:
            up = cls.upper()
            if label_up in up and any(ind in up for ind in indicators):
                return cls
        for cls in classes:
            up = cls.upper()
            if any(ind in up for ind in indicators):
                return cls
    return synthesize_class_name(year, label)


class ClassResolver:
    """Registry snapshot + per-(year, label) cache for one ingestion run.

    The registry is taken as an explicit input and is not extended while a
    sheet is being processed, so every row with the same (year, label)
    resolves to the same class.
    """

    def __init__(self, registry: Sequence[str]) -> None:
        self.registry: tuple[str, ...] = tuple(registry)
        self._cache: dict[tuple[str, str], str] = {}

    def resolve(self, year: str, label: str) -> str:
        key = (year or "", label or "")
        if key not in self._cache:
            self._cache[key] = resolve_class(year, label, self.registry)
        return self._cache[key]
