# Shared pytest fixtures
from __future__ import annotations

import tempfile
import zipfile
from collections.abc import Sequence
from pathlib import Path

import pandas as pd
import pytest

from roster_import.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        (p / "store").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("ROSTER_STORE_PATH", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
store:
  path: ./store/rak_skeme.json
  key: rak_skeme
header_scan_rows: 15
ic_year_prefixes:
  "15": "4"
  "14": "5"
  "13": "6"
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def make_xlsx(directory: Path, name: str, rows: Sequence[Sequence[object]], extra_sheets: dict | None = None) -> Path:
    """Write rows (no header) to the first sheet of a real .xlsx workbook."""
    p = directory / name
    with pd.ExcelWriter(p, engine="openpyxl") as writer:
        pd.DataFrame(list(rows)).to_excel(writer, sheet_name="Sheet1", header=False, index=False)
        for sheet, sheet_rows in (extra_sheets or {}).items():
            pd.DataFrame(list(sheet_rows)).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return p


def make_csv(directory: Path, name: str, lines: Sequence[str]) -> Path:
    p = directory / name
    p.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return p


@pytest.fixture()
def xlsx_factory(temp_workdir: Path):
    def _make(name: str, rows: Sequence[Sequence[object]], directory: Path | None = None, **kw) -> Path:
        return make_xlsx(directory or temp_workdir / "data", name, rows, **kw)
    return _make


@pytest.fixture()
def csv_factory(temp_workdir: Path):
    def _make(name: str, lines: Sequence[str], directory: Path | None = None) -> Path:
        return make_csv(directory or temp_workdir / "data", name, lines)
    return _make


@pytest.fixture()
def corrupt_xlsx_factory(xlsx_factory):
    """Real .xlsx container whose xl/workbook.xml is not well-formed XML."""
    def _make(name: str, directory: Path | None = None) -> Path:
        p = xlsx_factory(name, [[1, "AHMAD BIN ALI", "150101011234"]], directory=directory)
        with zipfile.ZipFile(p) as src:
            entries = {info.filename: src.read(info.filename) for info in src.infolist()}
        entries["xl/workbook.xml"] = b"<workbook><<< not xml"
        with zipfile.ZipFile(p, "w", zipfile.ZIP_DEFLATED) as dst:
            for filename, payload in entries.items():
                dst.writestr(filename, payload)
        return p
    return _make
