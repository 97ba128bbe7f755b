from __future__ import annotations

import csv
import io
import math
import zipfile
from pathlib import Path
from typing import Any

import aiofiles
import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

"""Workbook reader for roster spreadsheets.

Only the first sheet of a workbook is read. Every cell is coerced to text and
blank cells become empty strings, so the downstream heuristics never see NaN
or floats. Any failure to parse the file is reported as MalformedFileError and
no partial rows are returned.
"""

__all__ = [
    "MalformedFileError",
    "SUPPORTED_SUFFIXES",
    "read_first_sheet",
    "read_upload",
    "cell_text",
]

SUPPORTED_SUFFIXES = (".xlsx", ".csv")

_CSV_ENCODINGS = ("utf-8-sig", "cp1252")


class MalformedFileError(Exception):
    """Raised when a roster file cannot be opened/parsed as a spreadsheet."""


def cell_text(value: Any) -> str:
    """Coerce one raw cell value to trimmed text.

    Integral floats (how spreadsheets hand back long digit strings) are
    rendered without the trailing ``.0`` so IC numbers survive intact.
    """
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value).strip()


async def read_upload(path: Path) -> bytes:
    """Read the raw bytes of an uploaded roster file."""
    try:
        async with aiofiles.open(path, "rb") as f:
            return await f.read()
    except OSError as e:
        raise MalformedFileError(f"cannot read '{path.name}': {e}") from e


def _frame_to_rows(df: pd.DataFrame) -> list[list[str]]:
    rows: list[list[str]] = []
    for raw in df.itertuples(index=False, name=None):
        rows.append([cell_text(v) for v in raw])
    return rows


def _decode_csv(data: bytes) -> str:
    for encoding in _CSV_ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise MalformedFileError("csv is not valid text")


def _read_csv(data: bytes) -> list[list[str]]:
    text = _decode_csv(data)
    if not text.strip():
        return []
    # Roster exports have title rows narrower than the data rows; pandas needs
    # the widest row up front or it rejects the longer lines.
    width = max((len(r) for r in csv.reader(io.StringIO(text))), default=0)
    if width == 0:
        return []
    df = pd.read_csv(
        io.StringIO(text),
        header=None,
        names=list(range(width)),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=False,
    )
    return _frame_to_rows(df)


def _read_xlsx(data: bytes) -> list[list[str]]:
    df = pd.read_excel(io.BytesIO(data), sheet_name=0, header=None, dtype=object, engine="openpyxl")
    return _frame_to_rows(df)


def read_first_sheet(data: bytes, file_name: str) -> list[list[str]]:
    """Parse the first sheet of a roster file into rows of cell text.

    Parameters
    ----------
    data: ファイルの生バイト列
    file_name: 拡張子判定に使うファイル名 (.xlsx / .csv)
    """
    suffix = Path(file_name).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise MalformedFileError(
            f"unsupported roster format '{suffix or file_name}': use {', '.join(SUPPORTED_SUFFIXES)}"
        )
    try:
        if suffix == ".csv":
            return _read_csv(data)
        if not data:
            raise MalformedFileError(f"'{file_name}' is empty")
        return _read_xlsx(data)
    except MalformedFileError:
        raise
    except (
        ValueError,
        KeyError,
        OSError,
        csv.Error,
        zipfile.BadZipFile,
        InvalidFileException,
        pd.errors.ParserError,
        SyntaxError,  # xml.etree ParseError / lxml XMLSyntaxError from broken sheet XML
        TypeError,
    ) as e:
        raise MalformedFileError(f"cannot parse '{file_name}': {e}") from e
