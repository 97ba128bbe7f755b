from __future__ import annotations

from ..models.import_result import ImportResult

"""SUMMARY line rendering for roster imports."""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for tiny values
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ImportResult) -> str:
    """Render the SUMMARY line of an import run.

    Format:
    SUMMARY files={ok+failed} success={ok} failed={failed} ingested={n}
    added={n} duplicates={n} elapsed_sec={s} throughput_rps={r}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ImportResult(
        ...     success_files=1, failed_files=0, total_ingested=30, total_added=28,
        ...     total_duplicates=2, start_time=start, end_time=end,
        ...     elapsed_seconds=2.0, throughput_rows_per_sec=15.0
        ... )
        >>> render_summary_line(result)
        'SUMMARY files=1 success=1 failed=0 ingested=30 added=28 duplicates=2 elapsed_sec=2 throughput_rps=15'
    """
    return (
        f"SUMMARY files={result.total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"ingested={result.total_ingested} "
        f"added={result.total_added} "
        f"duplicates={result.total_duplicates} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"throughput_rps={_format_number(result.throughput_rows_per_sec)}"
    )
