from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from roster_import.config.loader import default_config
from roster_import.models.student import Student
from roster_import.store.student_store import StudentStore
from roster_import.services.pipeline import import_files

"""End-to-end roster scenarios run through import_files with a real store."""


@pytest.fixture()
def store(temp_workdir: Path) -> StudentStore:
    return StudentStore(temp_workdir / "store" / "rak_skeme.json").load()


def _run(paths: list[Path], store: StudentStore):
    return asyncio.run(import_files(paths, store, default_config()))


def test_scenario_a_file_name_context_full_match(store: StudentStore, xlsx_factory):
    p = xlsx_factory("TAHUN 4 INTAN.xlsx", [["BIL", "NAMA", "NO KP"], ["1", "AHMAD BIN ALI", "150101-01-1234"]])
    result = _run([p], store)
    assert result.total_added == 1
    s = store.find_by_ic("150101011234")
    assert s.name == "AHMAD BIN ALI"
    assert s.class_name == "TAHUN 4 INTAN"


def test_scenario_b_ic_prefix_year_synthesized(store: StudentStore, csv_factory):
    first = csv_factory("senarai_murid.csv", ["2,SITI BINTI OMAR,140202021234"])
    _run([first], store)
    assert store.find_by_ic("140202021234").class_name == "TAHUN 5"


def test_scenario_b_resolves_onto_existing_class(store: StudentStore, csv_factory):
    store.add_student(Student(id="x", name="ALI BIN ABU", ic_number="140909091234", class_name="5 NILAM"))
    p = csv_factory("senarai_murid.csv", ["2,SITI BINTI OMAR,140202021234"])
    _run([p], store)
    assert store.find_by_ic("140202021234").class_name == "5 NILAM"


def test_scenario_c_no_ic_rows(store: StudentStore, csv_factory):
    p = csv_factory("TAHUN 4 INTAN.csv", ["SENARAI MURID", "BIL,NAMA", "1,AHMAD BIN ALI", ","])
    result = _run([p], store)
    assert result.success_files == 1
    assert result.total_ingested == 0
    assert len(store) == 0


def test_scenario_d_same_ic_in_two_files(store: StudentStore, csv_factory, temp_workdir: Path):
    a = csv_factory("TAHUN 4 INTAN.csv", ["1,AHMAD BIN ALI,150101011234"])
    b = csv_factory("TAHUN 4 NILAM.csv", ["1,AHMAD ALI,150101-01-1234"])
    result = _run([a, b], store)
    assert result.total_ingested == 2
    assert result.total_added == 1
    assert result.total_duplicates == 1
    assert len(store) == 1
    s = store.find_by_ic("150101011234")
    assert (s.name, s.class_name) == ("AHMAD BIN ALI", "TAHUN 4 INTAN")

    reloaded = StudentStore(temp_workdir / "store" / "rak_skeme.json").load()
    assert [x.ic_number for x in reloaded.students] == ["150101011234"]


def test_scientific_notation_ic_recovered(store: StudentStore, csv_factory):
    p = csv_factory("TAHUN 6 DELIMA.csv", ["1,RAJU A/L MUTHU,1.30505051234E+11"])
    _run([p], store)
    assert store.find_by_ic("130505051234").class_name == "TAHUN 6 DELIMA"


def test_later_file_sees_classes_of_earlier_file(store: StudentStore, csv_factory):
    a = csv_factory("a TAHUN 4 INTAN.csv", ["1,AHMAD BIN ALI,150101011234"])
    # year only: the first registered class carrying the year wins
    b = csv_factory("b TAHUN 4.csv", ["TAHUN 4", "1,CHONG WEI MING,150404041234"])
    _run([a, b], store)
    assert store.find_by_ic("150404041234").class_name == "TAHUN 4 INTAN"
