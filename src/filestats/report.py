"""Report view construction from a completed histogram.

Three views are built from one snapshot, each an independent list:
- by size: bucket ascending
- by count: count descending, ties by bucket ascending
- by size contribution: bucket * count descending, ties by bucket ascending
"""

from typing import Mapping

from filestats.models import HistogramEntry, ReportRow, ReportView


SHEET_BY_SIZE = 'Sorted by Size'
SHEET_BY_COUNT = 'Sorted by Count'
SHEET_BY_SIZE_PERCENT = 'Sorted by Size%'


def histogram_entries(counts: Mapping[int, int]) -> list[HistogramEntry]:
    """Convert a bucket -> count mapping into entries, dropping empty buckets."""
    return [HistogramEntry(bucket=bucket, count=count) for bucket, count in counts.items() if count > 0]


def calculate_totals(entries: list[HistogramEntry]) -> tuple[int, int]:
    """Return (total_files, total_size_kb) for a list of entries."""
    total_files = 0
    total_size_kb = 0
    for entry in entries:
        total_files += entry.count
        total_size_kb += entry.size_kb
    return total_files, total_size_kb


def percentage(part: int, total: int) -> float:
    """part / total * 100, or 0.0 when total is zero."""
    if total == 0:
        return 0.0
    return part / total * 100


def sort_by_size(entries: list[HistogramEntry]) -> list[HistogramEntry]:
    return sorted(entries, key=lambda e: e.bucket)


def sort_by_count(entries: list[HistogramEntry]) -> list[HistogramEntry]:
    return sorted(entries, key=lambda e: (-e.count, e.bucket))


def sort_by_size_contribution(entries: list[HistogramEntry]) -> list[HistogramEntry]:
    return sorted(entries, key=lambda e: (-e.size_kb, e.bucket))


def build_view(
    name: str,
    order: str,
    entries: list[HistogramEntry],
    total_files: int,
    total_size_kb: int,
) -> ReportView:
    """Build a view with per-row percentages from already-ordered entries."""
    rows = [
        ReportRow(
            bucket=entry.bucket,
            count=entry.count,
            size_percent=percentage(entry.size_kb, total_size_kb),
            count_percent=percentage(entry.count, total_files),
        )
        for entry in entries
    ]
    return ReportView(
        name=name,
        order=order,
        entries=[entry.model_copy() for entry in entries],
        total_files=total_files,
        total_size_kb=total_size_kb,
        rows=rows,
    )


def build_report_views(counts: Mapping[int, int]) -> list[ReportView]:
    """Build the three report views from a completed histogram snapshot.

    Args:
        counts: bucket -> count mapping, read after the scan completed

    Returns:
        [by size, by count, by size contribution]
    """
    entries = histogram_entries(counts)
    total_files, total_size_kb = calculate_totals(entries)

    return [
        build_view(SHEET_BY_SIZE, 'size', sort_by_size(entries), total_files, total_size_kb),
        build_view(SHEET_BY_COUNT, 'count', sort_by_count(entries), total_files, total_size_kb),
        build_view(
            SHEET_BY_SIZE_PERCENT, 'size_percent', sort_by_size_contribution(entries), total_files, total_size_kb
        ),
    ]
