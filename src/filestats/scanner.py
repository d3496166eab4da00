"""Concurrent directory traversal engine.

This module provides the DirectoryScanner class which walks a directory
tree, classifies every regular file into a size bucket and aggregates the
counts into a shared SizeHistogram.

Key behaviors:
- One traversal task per directory; each task lists only its directory's
  direct children and spawns a new task for every subdirectory
- max_workers=0: unbounded fan-out, one thread per directory
- max_workers>0: bounded ThreadPoolExecutor, directories are queued
- A TaskTracker counts outstanding tasks (incremented before spawn,
  decremented when a task finishes, even on error); scan() returns only
  once it reaches zero
- Directories that cannot be listed are logged, recorded and skipped
- Symbolic links are never followed
"""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from time import time

from filestats import prometheus as prom
from filestats.histogram import SizeHistogram, bucket_for_size


logger = logging.getLogger(__name__)

MODE_UNBOUNDED = 'unbounded'
MODE_POOLED = 'pooled'


class TaskTracker:
    """Wait-group for a dynamically growing set of traversal tasks.

    ``add()`` must be called before a task is handed to a thread or pool and
    ``done()`` exactly once when it finishes. Since a parent only finishes
    after it has registered all of its children, the counter can only reach
    zero when the whole tree has been visited.
    """

    def __init__(self):
        self._outstanding = 0
        self._condition = threading.Condition()

    def add(self, count: int = 1) -> None:
        with self._condition:
            self._outstanding += count
        prom.active_tasks.inc(count)

    def done(self) -> None:
        with self._condition:
            if self._outstanding <= 0:
                raise RuntimeError('TaskTracker.done() called more times than add()')
            self._outstanding -= 1
            if self._outstanding == 0:
                self._condition.notify_all()
        prom.active_tasks.dec()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until no tasks are outstanding. Returns False on timeout."""
        with self._condition:
            return self._condition.wait_for(lambda: self._outstanding == 0, timeout)

    @property
    def outstanding(self) -> int:
        with self._condition:
            return self._outstanding


class ScanResult:
    """Result of scanning one root path."""

    def __init__(self, root_path: str, mode: str):
        self.root_path = root_path
        self.mode = mode
        self.histogram = SizeHistogram()
        self.errors: list[tuple[str, str]] = []
        self.directories_scanned: int = 0
        self.total_time: float = 0.0
        self.completed_at: datetime | None = None

    @property
    def counts(self):
        """Read-only bucket -> count mapping."""
        return self.histogram.snapshot()

    @property
    def total_files(self) -> int:
        return self.histogram.total_files


def validate_root(root_path: str) -> str:
    """Check the root path before scanning and return its absolute form.

    Raises:
        ValueError: if the path is empty, missing, unreadable, or neither a
            directory nor a regular file
    """
    if root_path is None or not root_path.strip():
        raise ValueError('Root path is empty')

    path = os.path.abspath(root_path.strip())

    if not os.path.exists(path):
        raise ValueError(f'Path not found: {path}')

    if os.path.isdir(path):
        if not os.access(path, os.R_OK | os.X_OK):
            raise ValueError(f'Directory is not readable: {path}')
    elif not os.path.isfile(path):
        raise ValueError(f'Not a directory or regular file: {path}')

    return path


class _Traversal:
    """State shared by all tasks of a single scan."""

    def __init__(self, result: ScanResult, executor: ThreadPoolExecutor | None):
        self.result = result
        self.executor = executor
        self.tracker = TaskTracker()
        self._lock = threading.Lock()

    def spawn(self, path: str) -> None:
        """Register a task for ``path`` and start it."""
        self.tracker.add()
        try:
            if self.executor is not None:
                self.executor.submit(self._run, path)
            else:
                thread = threading.Thread(target=self._run, args=(path,), name='filestats-scan', daemon=True)
                thread.start()
        except RuntimeError as e:
            # Thread or pool refused the task; it will never run, so release it here
            self._record_error(path, e)
            self.tracker.done()

    def _run(self, path: str) -> None:
        try:
            self._scan_directory(path)
        except Exception as e:
            logger.exception(f'[SCAN] Unexpected error in task for {path}')
            self._record_error(path, e)
        finally:
            self.tracker.done()

    def _scan_directory(self, path: str) -> None:
        local_counts: dict[int, int] = {}
        sizes: list[int] = []

        try:
            with os.scandir(path) as entries:
                for entry in entries:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            self.spawn(entry.path)
                        elif entry.is_file(follow_symlinks=False):
                            size = entry.stat(follow_symlinks=False).st_size
                            bucket = bucket_for_size(size)
                            local_counts[bucket] = local_counts.get(bucket, 0) + 1
                            sizes.append(size)
                    except FileNotFoundError:
                        logger.debug(f'[SCAN] Entry vanished during scan: {entry.path}')
                    except OSError as e:
                        logger.warning(f'[SCAN] Cannot stat {entry.path}: {e}')
        except OSError as e:
            self._record_error(path, e)
        else:
            with self._lock:
                self.result.directories_scanned += 1
            prom.directories_scanned_total.inc()
        finally:
            # Files enumerated before a mid-listing failure are still counted
            self.result.histogram.merge(local_counts)
            prom.record_files(sizes)

        logger.debug(f'[SCAN] {path}: {len(sizes)} files')

    def _record_error(self, path: str, error: BaseException) -> None:
        logger.warning(f'[SCAN] Cannot read directory {path}: {error}')
        prom.record_directory_error(error)
        with self._lock:
            self.result.errors.append((path, str(error)))


class DirectoryScanner:
    """Scans a directory tree into a size histogram.

    This class provides the main entry point for the `filestats` command.

    Key behaviors:
    - max_workers=0: one thread per directory, no limit
    - max_workers>0: at most max_workers threads, directories wait in the
      pool's queue
    """

    def __init__(self, max_workers: int = 0):
        """Initialize the scanner.

        Args:
            max_workers: Size of the worker pool, 0 for unbounded fan-out
        """
        if max_workers < 0:
            raise ValueError(f'max_workers cannot be negative: {max_workers}')
        self.max_workers = max_workers

    @property
    def mode(self) -> str:
        return MODE_POOLED if self.max_workers > 0 else MODE_UNBOUNDED

    def scan(self, root_path: str) -> ScanResult:
        """Scan a directory (or a single file) and block until done.

        Args:
            root_path: Directory to scan. A regular file is classified on its own.

        Returns:
            ScanResult holding the completed histogram and any directory errors

        Raises:
            ValueError: if root_path is not usable (see validate_root)
        """
        root = validate_root(root_path)
        result = ScanResult(root_path=root, mode=self.mode)
        start_time = time()

        if os.path.isfile(root):
            logger.debug(f'[SCAN] Root is a file, classifying it alone: {root}')
            size = os.stat(root).st_size
            result.histogram.add_size(size)
            prom.record_files([size])
        else:
            logger.debug(f'[SCAN] Starting {self.mode} scan of {root} (max_workers={self.max_workers})')
            if self.max_workers > 0:
                with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix='filestats-scan') as executor:
                    traversal = _Traversal(result, executor)
                    traversal.spawn(root)
                    traversal.tracker.wait()
            else:
                traversal = _Traversal(result, None)
                traversal.spawn(root)
                traversal.tracker.wait()

        result.total_time = time() - start_time
        result.completed_at = datetime.now()
        prom.record_scan(self.mode, result.total_time)

        logger.info(
            f'[SCAN] Completed {root}: {result.total_files} files in '
            f'{len(result.histogram)} buckets, {result.directories_scanned} directories, '
            f'{len(result.errors)} errors in {result.total_time:.2f}s'
        )
        return result


def scan(root_path: str, max_workers: int = 0) -> ScanResult:
    """Scan ``root_path`` with a new DirectoryScanner."""
    return DirectoryScanner(max_workers=max_workers).scan(root_path)
