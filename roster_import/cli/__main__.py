from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from roster_import.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from roster_import.excel.reader import MalformedFileError, read_first_sheet
from roster_import.logging.init import log_summary, setup_logging
from roster_import.models.config_models import ImportConfig
from roster_import.services.metadata import MetadataContext, extract_sheet_metadata
from roster_import.services.pipeline import ProcessingError, import_files, scan_roster_files
from roster_import.services.row_normalizer import normalize_row
from roster_import.services.summary import render_summary_line
from roster_import.store.student_store import StoreError, StudentStore

"""CLI entrypoint.

Flow:
- Load .env (ROSTER_STORE_PATH) and config/import.yml
- Collect roster files (arguments, or a scan of source_directory)
- Ingest + merge each file into the student store
- Print one SUMMARY line; exit code reflects file failures
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; .env values win over the process env."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Class roster spreadsheet importer")
    p.add_argument("files", nargs="*", type=Path, help="Roster files (.xlsx/.csv); default: scan source_directory")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Config YAML path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--dry-run", action="store_true", help="Ingest without writing the store")
    p.add_argument("--audit-skipped", action="store_true", help="Write skipped rows to logs/skipped-*.log")
    p.add_argument("--inspect-data", action="store_true", help="Print detected class context & first rows then exit")
    return p.parse_args(argv)


def _inspect_data(paths: list[Path], cfg: ImportConfig) -> int:
    if not paths:
        print("inspect: no roster files")
        return EXIT_SUCCESS_ALL
    for f in paths:
        print(f"FILE: {f.name}")
        try:
            rows = read_first_sheet(f.read_bytes(), f.name)
        except (MalformedFileError, OSError) as e:
            print(f"  read_error: {e}")
            continue
        meta = extract_sheet_metadata(
            MetadataContext(
                file_name=f.name,
                rows=rows,
                header_scan_rows=cfg.ingest.header_scan_rows,
                class_keywords=cfg.ingest.class_keywords,
            )
        )
        print(f"  year={meta.year_level!r} label={meta.class_label!r} rows={len(rows)}")
        shown = 0
        for number, cells in enumerate(rows, start=1):
            result = normalize_row(cells, number)
            print(f"    row {number}: {result}")
            shown += 1
            if shown >= 5:
                break
    return EXIT_SUCCESS_ALL


def _with_audit(cfg: ImportConfig) -> ImportConfig:
    return replace(cfg, ingest=replace(cfg.ingest, audit_skipped_rows=True))


def main(argv: list[str] | None = None) -> int:
    # None のときのみ sys.argv を読む (テストからの main([]) 呼び出し対策)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    if args.audit_skipped:
        cfg = _with_audit(cfg)

    if args.files:
        paths = list(args.files)
    else:
        directory = Path(cfg.source_directory)
        try:
            paths = scan_roster_files(directory)
        except ProcessingError as e:
            logger.error(f"directory not found: {directory} ({e})")
            return EXIT_FATAL
        logger.info(f"Processing files from: {directory}")

    if args.inspect_data:
        return _inspect_data(paths, cfg)

    store = StudentStore(Path(cfg.store.path), key=cfg.store.key)
    try:
        store.load()
        result = asyncio.run(import_files(paths, store, cfg, dry_run=args.dry_run))
    except StoreError as e:
        logger.error(f"store: {e}")
        return EXIT_FATAL

    logger.info(f"store={cfg.store.path} students={len(store)} classes={len(store.sorted_classes())}")

    summary_line = render_summary_line(result)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
