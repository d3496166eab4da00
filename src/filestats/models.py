"""Pydantic models for scan results and report views"""

from pydantic import BaseModel, Field

from filestats.utils import human_readable_size


class HistogramEntry(BaseModel):
    """Number of files that fall into one size bucket

    Attributes:
        bucket: File size in whole kilobytes (bytes // 1024)
        count: Number of files in this bucket
    """

    bucket: int = Field(..., ge=0, description="File size in KB (truncated)")
    count: int = Field(..., ge=1, description="Number of files in this bucket")

    @property
    def size_kb(self) -> int:
        """Total kilobytes contributed by this bucket."""
        return self.bucket * self.count


class ReportRow(BaseModel):
    """One spreadsheet row: a histogram entry with its percentages."""

    bucket: int = Field(..., description="File size in KB")
    count: int = Field(..., description="Number of files")
    size_percent: float = Field(..., description="bucket * count as a percentage of total size")
    count_percent: float = Field(..., description="count as a percentage of total files")


class ReportView(BaseModel):
    """Histogram entries in one presentation order, with totals

    Attributes:
        name: Sheet name (e.g. 'Sorted by Count')
        order: Ordering key ('size', 'count' or 'size_percent')
        entries: Entries in view order
        total_files: Sum of counts
        total_size_kb: Sum of bucket * count
    """

    name: str = Field(..., description="View / sheet name")
    order: str = Field(..., description="Ordering key: size, count or size_percent")
    entries: list[HistogramEntry] = Field(default_factory=list)
    total_files: int = Field(0, description="Total number of files")
    total_size_kb: int = Field(0, description="Total size in KB")
    rows: list[ReportRow] = Field(default_factory=list, description="Entries with percentages")


class ScanError(BaseModel):
    """A directory that could not be read during the scan."""

    path: str
    error: str


class ScanResponse(BaseModel):
    """Complete output of a scan, as printed by `filestats --json`"""

    path: str = Field(..., description="Scanned root path")
    time: float = Field(..., description="Scan duration in seconds")
    completed_at: str = Field(..., description="Scan completion timestamp (ISO format)")
    mode: str = Field(..., description="Scheduling mode: unbounded or pooled")
    directories_scanned: int = Field(0, description="Number of directories listed")
    total_files: int = Field(0, description="Total number of files")
    total_size_kb: int = Field(0, description="Total size in KB")
    bucket_count: int = Field(0, description="Number of distinct size buckets")
    views: list[ReportView] = Field(default_factory=list)
    errors: list[ScanError] = Field(default_factory=list)
    output_file: str | None = Field(None, description="Spreadsheet written for this scan")

    def to_cli(self, top: int = 10, colorize: bool = False) -> str:
        """Format scan summary for CLI output."""
        BOLD = '\033[1m'
        CYAN = '\033[36m'
        GREY = '\033[90m'
        RED = '\033[31m'
        RESET = '\033[0m'

        lines = []

        if colorize:
            lines.append(f"{BOLD}File Size Statistics{RESET}")
        else:
            lines.append("File Size Statistics")

        lines.append(f"Path: {self.path}")
        lines.append(f"Time: {self.time:.3f}s ({self.mode})")
        lines.append(f"Directories: {self.directories_scanned:,}")
        lines.append(f"Files: {self.total_files:,}")
        lines.append(f"Total size: {human_readable_size(self.total_size_kb * 1024)} ({self.total_size_kb:,} KB)")
        lines.append(f"Buckets: {self.bucket_count:,}")

        by_count = next((v for v in self.views if v.order == 'count'), None)
        if by_count and by_count.rows and top > 0:
            lines.append("")
            title = f"Top {min(top, len(by_count.rows))} sizes by count:"
            lines.append(f"{CYAN}{title}{RESET}" if colorize else title)
            lines.append(f"  {'Size (KB)':>10}  {'Count':>10}  {'Count %':>8}  {'Size %':>8}")
            for row in by_count.rows[:top]:
                lines.append(
                    f"  {row.bucket:>10,}  {row.count:>10,}  {row.count_percent:>7.2f}%  {row.size_percent:>7.2f}%"
                )

        if self.errors:
            lines.append("")
            header = f"Unreadable directories: {len(self.errors)}"
            lines.append(f"{RED}{header}{RESET}" if colorize else header)
            for err in self.errors:
                if colorize:
                    lines.append(f"  {err.path} {GREY}{err.error}{RESET}")
                else:
                    lines.append(f"  {err.path}: {err.error}")

        if self.output_file:
            lines.append("")
            lines.append(f"Report written to {self.output_file}")

        return "\n".join(lines)
