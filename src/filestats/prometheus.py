"""Prometheus metrics for FileStats scans"""

from prometheus_client import REGISTRY, Counter, Gauge, Histogram, write_to_textfile

# ============================================================================
# Scan Metrics
# ============================================================================

scans_total = Counter(
    'filestats_scans_total',
    'Total number of directory scans',
    ['mode'],  # unbounded, pooled
)

scan_duration_seconds = Histogram(
    'filestats_scan_duration_seconds',
    'Time spent scanning a directory tree',
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0, 900.0],
    # 10ms to 15 minutes - covers small project dirs up to whole disks
)


# ============================================================================
# Traversal Metrics
# ============================================================================

directories_scanned_total = Counter(
    'filestats_directories_scanned_total', 'Total number of directories listed by traversal tasks'
)

directory_errors_total = Counter(
    'filestats_directory_errors_total',
    'Total number of directories that could not be listed',
    ['error_type'],  # PermissionError, FileNotFoundError, ...
)

files_classified_total = Counter('filestats_files_classified_total', 'Total number of regular files classified')

active_tasks = Gauge('filestats_active_tasks', 'Number of traversal tasks currently outstanding')

file_size_bytes = Histogram(
    'filestats_file_size_bytes',
    'Distribution of classified file sizes',
    buckets=[1024, 10 * 1024, 100 * 1024, 1024**2, 10 * 1024**2, 100 * 1024**2, 1024**3, 10 * 1024**3],
    # 1KB to 10GB
)


# ============================================================================
# Helper Functions
# ============================================================================


def record_scan(mode: str, duration: float):
    """Record a completed scan."""
    scans_total.labels(mode=mode).inc()
    scan_duration_seconds.observe(duration)


def record_directory_error(error: BaseException):
    """Record a directory that could not be listed."""
    directory_errors_total.labels(error_type=type(error).__name__).inc()


def record_files(sizes: list[int]):
    """Record a batch of classified file sizes from one directory."""
    if not sizes:
        return
    files_classified_total.inc(len(sizes))
    for size in sizes:
        file_size_bytes.observe(size)


def write_metrics(path: str):
    """Write the current registry in node-exporter textfile format."""
    write_to_textfile(path, REGISTRY)
