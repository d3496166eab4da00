"""Spreadsheet export of report views.

Each view becomes one sheet:
- Row 1: File Size in KB | Count | Size % | Count %
- Row 2: Total Files | <files> | Total Size (KB) | <size>
- Row 3+: bucket, count, size %, count %
"""

import logging
from datetime import datetime
from pathlib import Path

from openpyxl import Workbook

from filestats.models import ReportView


logger = logging.getLogger(__name__)

HEADERS = ['File Size in KB', 'Count', 'Size %', 'Count %']
TIMESTAMP_FORMAT = '%Y-%m-%d_%H-%M-%S'


def report_filename(completed_at: datetime) -> str:
    """FileStats_<YYYY-MM-DD_HH-MM-SS>.xlsx for the given timestamp."""
    return f'FileStats_{completed_at.strftime(TIMESTAMP_FORMAT)}.xlsx'


def write_view(sheet, view: ReportView) -> None:
    """Populate one worksheet from a view."""
    sheet.append(HEADERS)
    sheet.append(['Total Files', view.total_files, 'Total Size (KB)', view.total_size_kb])
    for row in view.rows:
        sheet.append([row.bucket, row.count, row.size_percent, row.count_percent])


def write_workbook(views: list[ReportView], path: str | Path) -> Path:
    """Write all views to an .xlsx file, one sheet per view.

    Args:
        views: Report views in sheet order
        path: Destination file

    Returns:
        Path of the written file

    Raises:
        OSError: if the file cannot be saved
    """
    path = Path(path)
    workbook = Workbook()
    # Workbook() starts with one empty sheet; reuse it for the first view
    default_sheet = workbook.active

    for i, view in enumerate(views):
        if i == 0:
            sheet = default_sheet
            sheet.title = view.name
        else:
            sheet = workbook.create_sheet(title=view.name)
        write_view(sheet, view)

    logger.debug(f'[EXPORT] Saving {len(views)} sheets to {path}')
    workbook.save(path)
    logger.info(f'[EXPORT] Report written to {path}')
    return path
