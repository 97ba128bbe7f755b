from __future__ import annotations

import pytest

from roster_import.models.sheet_metadata import SheetMetadata
from roster_import.services.metadata import (
    MetadataContext,
    extract_sheet_metadata,
    from_class_keyword,
    from_file_name,
    from_header_rows,
    normalize_year_level,
)


def _ctx(file_name: str, rows=None, **kw) -> MetadataContext:
    return MetadataContext(file_name=file_name, rows=rows or [], **kw)


@pytest.mark.parametrize(
    "token,expected",
    [("EMPAT", "4"), ("lima", "5"), (" 3 ", "3"), ("satu", "1"), ("T4", "T4"), ("", "")],
)
def test_normalize_year_level(token, expected):
    assert normalize_year_level(token) == expected


@pytest.mark.parametrize(
    "file_name,year,label",
    [
        ("TAHUN 4 INTAN.xlsx", "4", "INTAN"),
        ("tahun 5 nilam.csv", "5", "NILAM"),
        ("Senarai Murid TAHUN ENAM MAWAR 2024.xlsx", "6", "MAWAR"),
        ("TAHUN_2_DELIMA.xlsx", "2", "DELIMA"),
    ],
)
def test_file_name_pattern(file_name, year, label):
    assert from_file_name(_ctx(file_name)) == SheetMetadata(year_level=year, class_label=label)


def test_file_name_pattern_wins_over_header():
    rows = [["SEKOLAH KEBANGSAAN"], ["TAHUN 6", "KELAS MAWAR"]]
    meta = extract_sheet_metadata(_ctx("TAHUN 4 INTAN.xlsx", rows))
    assert meta == SheetMetadata(year_level="4", class_label="INTAN")


def test_file_name_without_pattern():
    assert from_file_name(_ctx("senarai_murid.csv")) is None


def test_header_scan_finds_year_and_class():
    rows = [
        ["SENARAI NAMA MURID"],
        ["TAHUN 3", "", "KELAS AKID"],
        ["BIL", "NAMA", "KELAS", "IC"],
    ]
    meta = from_header_rows(_ctx("murid.xlsx", rows))
    assert meta == SheetMetadata(year_level="3", class_label="AKID")


def test_header_scan_class_label_stops_at_delimiter():
    rows = [["KELAS: ZAMRUD", "GURU KELAS PN AINA"]]
    meta = from_header_rows(_ctx("murid.xlsx", rows))
    assert meta is not None
    assert meta.class_label == "ZAMRUD"
    assert meta.year_level == ""


def test_header_scan_ignores_column_header_cell():
    rows = [["BIL", "NAMA", "KELAS", "IC"]]
    assert from_header_rows(_ctx("murid.xlsx", rows)) is None


def test_header_scan_limited_to_first_rows():
    rows = [[""]] * 15 + [["TAHUN 2"]]
    assert from_header_rows(_ctx("murid.xlsx", rows)) is None
    assert from_header_rows(_ctx("murid.xlsx", rows, header_scan_rows=16)) == SheetMetadata(year_level="2")


def test_keyword_fallback_only_fills_label():
    meta = extract_sheet_metadata(_ctx("data anggerik.xlsx", [["BIL", "NAMA"]]))
    assert meta == SheetMetadata(year_level="", class_label="ANGGERIK")


def test_keyword_first_match_wins():
    assert from_class_keyword(_ctx("NILAM INTAN.xlsx")) == SheetMetadata(class_label="NILAM")


def test_header_year_kept_and_keyword_label_added():
    rows = [["TAHUN 1"]]
    meta = extract_sheet_metadata(_ctx("senarai delima.csv", rows))
    assert meta == SheetMetadata(year_level="1", class_label="DELIMA")


def test_nothing_found_gives_empty_metadata():
    meta = extract_sheet_metadata(_ctx("senarai_murid.csv", [["1", "SITI BINTI OMAR", "140202021234"]]))
    assert meta == SheetMetadata()
    assert not meta.complete
