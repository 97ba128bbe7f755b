from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from pathlib import Path

from ..excel.reader import SUPPORTED_SUFFIXES, MalformedFileError, read_first_sheet, read_upload
from ..logging.skip_log import SkipLogBuffer
from ..models.config_models import ImportConfig, IngestConfig
from ..models.import_result import FileStat, ImportResult
from ..models.row_data import NormalizedRow, RowRejection
from ..models.student import Student
from ..store.student_store import StudentStore
from .assembler import assemble_students
from .class_resolver import ClassResolver
from .metadata import MetadataContext, extract_sheet_metadata
from .progress import ProgressTracker
from .row_normalizer import infer_year_from_ic, normalize_row

"""Roster ingestion pipeline orchestration.

ingest_rows / ingest_bytes / ingest_file turn one roster into a list of new
Student records without touching the store; the class registry they resolve
against is an explicit argument. import_files is the batch flow used by the
CLI: each file is ingested, then merged into the store by IC number.

Only a file that cannot be parsed surfaces as an error (MalformedFileError).
Rejected rows and loose class resolutions are absorbed silently.
"""

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error that prevents a batch import from starting."""


def _split_rows(
    rows: Sequence[Sequence[str]],
    file_name: str,
    skip_log: SkipLogBuffer | None,
) -> list[NormalizedRow]:
    accepted: list[NormalizedRow] = []
    for row_number, cells in enumerate(rows, start=1):
        result = normalize_row(cells, row_number)
        if isinstance(result, RowRejection):
            if skip_log is not None:
                skip_log.record_rejection(file_name, result)
            continue
        accepted.append(result)
    return accepted


def ingest_rows(
    rows: Sequence[Sequence[str]],
    file_name: str,
    registry: Iterable[str],
    config: IngestConfig | None = None,
    skip_log: SkipLogBuffer | None = None,
) -> list[Student]:
    """Run metadata extraction, row normalization, class resolution and assembly.

    Parameters
    ----------
    rows: 先頭シートの行 (セルは文字列化済み)
    file_name: 元ファイル名 (TAHUN/KELAS 情報を含むことがある)
    registry: 既存クラス名 (resolution order = iteration order)
    config: ingestion heuristics (defaults when None)
    skip_log: optional audit buffer receiving rejected rows
    """
    cfg = config or IngestConfig()
    ctx = MetadataContext(
        file_name=file_name,
        rows=rows,
        header_scan_rows=cfg.header_scan_rows,
        class_keywords=cfg.class_keywords,
    )
    meta = extract_sheet_metadata(ctx)
    resolver = ClassResolver(list(registry))
    accepted = _split_rows(rows, file_name, skip_log)

    def class_for_row(row: NormalizedRow) -> str:
        # IC prefix only fills a missing sheet-level year
        year = meta.year_level or infer_year_from_ic(row.ic_number, cfg.ic_year_prefixes)
        return resolver.resolve(year, meta.class_label)

    students = assemble_students(
        accepted,
        class_for_row,
        gender=cfg.placeholder_gender,
        house=cfg.placeholder_house,
    )
    logger.debug(
        "ingested file=%s year=%r label=%r rows=%d students=%d",
        file_name,
        meta.year_level,
        meta.class_label,
        len(rows),
        len(students),
    )
    return students


def ingest_bytes(
    data: bytes,
    file_name: str,
    registry: Iterable[str],
    config: IngestConfig | None = None,
    skip_log: SkipLogBuffer | None = None,
) -> list[Student]:
    rows = read_first_sheet(data, file_name)
    return ingest_rows(rows, file_name, registry, config, skip_log)


async def ingest_file(
    path: Path,
    registry: Iterable[str],
    config: IngestConfig | None = None,
    skip_log: SkipLogBuffer | None = None,
) -> list[Student]:
    """Read an uploaded roster and ingest it.

    The file read is the only await; parsing and assembly run synchronously
    afterwards, so a failure leaves nothing half-built.
    """
    data = await read_upload(path)
    return ingest_bytes(data, path.name, registry, config, skip_log)


def scan_roster_files(directory: Path) -> list[Path]:
    """List .xlsx / .csv files in directory (non-recursive, sorted by name).

    Raises:
        ProcessingError: If directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(
            (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES),
            key=lambda p: p.name,
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


async def import_files(
    paths: Sequence[Path],
    store: StudentStore,
    config: ImportConfig,
    dry_run: bool = False,
) -> ImportResult:
    """Ingest each roster file and merge it into the store.

    Files are processed strictly in order; every merge sees the classes added
    by the files before it. A malformed file is counted as failed and the run
    continues. The store is saved once at the end unless dry_run is set.
    """
    start_time = datetime.now(UTC)
    skip_log = SkipLogBuffer() if config.ingest.audit_skipped_rows else None

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    total_ingested = 0
    total_added = 0
    total_duplicates = 0

    with ProgressTracker(len(paths), description="Importing rosters") as progress:
        for path in paths:
            progress.start_file(path)
            file_start = datetime.now(UTC)
            try:
                students = await ingest_file(path, store.class_registry(), config.ingest, skip_log)
            except MalformedFileError as e:
                failed_count += 1
                logger.error(f"{path.name}: {e}")
                file_stats.append(
                    FileStat(
                        file_name=path.name,
                        status="failed",
                        ingested=0,
                        added=0,
                        elapsed_seconds=(datetime.now(UTC) - file_start).total_seconds(),
                        error=str(e),
                    )
                )
                progress.finish_file(success=False)
                continue

            if dry_run:
                added, duplicates = 0, 0
            else:
                merge = store.merge_students(students)
                added, duplicates = merge.added, merge.duplicates

            success_count += 1
            total_ingested += len(students)
            total_added += added
            total_duplicates += duplicates
            logger.info(f"{path.name}: {len(students)} students ingested, {added} added")
            file_stats.append(
                FileStat(
                    file_name=path.name,
                    status="success",
                    ingested=len(students),
                    added=added,
                    elapsed_seconds=(datetime.now(UTC) - file_start).total_seconds(),
                )
            )
            progress.set_postfix(success=success_count, failed=failed_count, added=total_added)
            progress.finish_file(success=True)

    try:
        if not dry_run and total_added:
            store.save()
    finally:
        # audit trail survives a failed store write
        if skip_log is not None:
            skipped_path = skip_log.flush()
            if skipped_path is not None:
                logger.info(f"skipped rows written to {skipped_path}")

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    throughput = total_ingested / elapsed_seconds if elapsed_seconds > 0 else 0.0

    return ImportResult(
        success_files=success_count,
        failed_files=failed_count,
        total_ingested=total_ingested,
        total_added=total_added,
        total_duplicates=total_duplicates,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_rows_per_sec=throughput,
        file_stats=file_stats,
    )
