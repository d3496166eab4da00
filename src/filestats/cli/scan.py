"""CLI command for scanning a directory tree."""

import logging
import sys
from pathlib import Path

import click

from filestats.export import report_filename, write_workbook
from filestats.models import ReportView, ScanError, ScanResponse
from filestats.prometheus import write_metrics
from filestats.report import build_report_views
from filestats.scanner import DirectoryScanner, ScanResult
from filestats.utils import get_bool_env, get_max_workers, get_output_dir, setup_logging


logger = logging.getLogger(__name__)


@click.command('scan')
@click.argument('path', required=False)
@click.option(
    '--output',
    '-o',
    type=click.Path(dir_okay=False),
    default=None,
    help='Spreadsheet file to write. Default: FileStats_<timestamp>.xlsx in FILESTATS_OUTPUT_DIR or cwd.',
)
@click.option(
    '--max-workers',
    type=click.IntRange(min=0),
    default=None,
    help='Worker pool size. 0 spawns one thread per directory (default: FILESTATS_MAX_WORKERS or 0)',
)
@click.option('--json', 'json_output', is_flag=True, help='Output in JSON format')
@click.option('--no-export', is_flag=True, help='Do not write the spreadsheet')
@click.option('--metrics-file', type=click.Path(dir_okay=False), default=None, help='Write Prometheus metrics to file')
@click.option('--top', type=click.IntRange(min=0), default=10, help='Number of buckets to list (default: 10)')
@click.option('--color/--no-color', default=None, help='Colorize output (default: when stdout is a terminal)')
def scan_command(
    path: str | None,
    output: str | None,
    max_workers: int | None,
    json_output: bool,
    no_export: bool,
    metrics_file: str | None,
    top: int,
    color: bool | None,
):
    """Scan a directory and report how many files fall into each size (KB).

    Every subdirectory is scanned concurrently. Directories that cannot be
    read are reported and skipped. If PATH is a file, only that file is
    classified. If PATH is omitted you are prompted for it.

    \b
    Examples:
        filestats scan /var/log                  # Scan and write FileStats_<timestamp>.xlsx
        filestats scan /data --max-workers 8     # Bounded worker pool
        filestats scan . -o stats.xlsx           # Custom report file
        filestats scan . --json --no-export      # JSON only
    """
    setup_logging()

    if path is None:
        path = click.prompt('Enter the directory path', type=str)

    if max_workers is None:
        max_workers = get_max_workers()

    try:
        result = DirectoryScanner(max_workers=max_workers).scan(path)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'PATH'")

    views = build_report_views(result.counts)
    exit_code = 0

    output_file = None
    if not no_export:
        target = Path(output) if output else get_output_dir() / report_filename(result.completed_at)
        try:
            write_workbook(views, target)
            output_file = str(target)
        except OSError as e:
            logger.error(f'Failed to write report {target}: {e}')
            click.echo(f'Error: could not write {target}: {e}', err=True)
            exit_code = 1

    if metrics_file:
        try:
            write_metrics(metrics_file)
        except OSError as e:
            logger.error(f'Failed to write metrics {metrics_file}: {e}')
            click.echo(f'Error: could not write {metrics_file}: {e}', err=True)
            exit_code = 1

    response = _build_response(result, views, output_file)

    if json_output:
        click.echo(response.model_dump_json(indent=2))
    else:
        colorize = get_bool_env('FILESTATS_COLOR', sys.stdout.isatty()) if color is None else color
        click.echo(response.to_cli(top=top, colorize=colorize))

    if exit_code:
        sys.exit(exit_code)


def _build_response(result: ScanResult, views: list[ReportView], output_file: str | None) -> ScanResponse:
    """Assemble the CLI/JSON response from a finished scan."""
    first = views[0]
    return ScanResponse(
        path=result.root_path,
        time=result.total_time,
        completed_at=result.completed_at.isoformat(),
        mode=result.mode,
        directories_scanned=result.directories_scanned,
        total_files=first.total_files,
        total_size_kb=first.total_size_kb,
        bucket_count=len(first.entries),
        views=views,
        errors=[ScanError(path=p, error=e) for p, e in result.errors],
        output_file=output_file,
    )
