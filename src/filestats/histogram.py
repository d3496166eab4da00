"""Thread-safe size histogram shared by all traversal tasks.

Files are classified into buckets by their size in whole kilobytes
(``size_bytes // 1024``). Every traversal task increments the same
SizeHistogram, so all mutation goes through a single lock. Reads happen
only after the scan has finished, through ``snapshot()``.
"""

import threading
from types import MappingProxyType
from typing import Mapping


BYTES_PER_KB = 1024


def bucket_for_size(size_bytes: int) -> int:
    """Return the size bucket (whole kilobytes, truncated) for a file size."""
    if size_bytes < 0:
        raise ValueError(f'File size cannot be negative: {size_bytes}')
    return size_bytes // BYTES_PER_KB


class SizeHistogram:
    """Mapping of size bucket -> number of files, safe for concurrent writers."""

    def __init__(self):
        self._counts: dict[int, int] = {}
        self._lock = threading.Lock()

    def increment(self, bucket: int) -> None:
        """Atomically add one file to a bucket."""
        with self._lock:
            self._counts[bucket] = self._counts.get(bucket, 0) + 1

    def add_size(self, size_bytes: int) -> int:
        """Classify a file size and count it. Returns the bucket used."""
        bucket = bucket_for_size(size_bytes)
        self.increment(bucket)
        return bucket

    def merge(self, partial: Mapping[int, int]) -> None:
        """Fold a task-local partial count into the shared histogram.

        Takes the lock once for the whole batch, so a task can accumulate
        its directory locally and publish it in one step.
        """
        with self._lock:
            for bucket, count in partial.items():
                if count <= 0:
                    continue
                self._counts[bucket] = self._counts.get(bucket, 0) + count

    def snapshot(self) -> Mapping[int, int]:
        """Return a read-only copy of the current counts."""
        with self._lock:
            return MappingProxyType(dict(self._counts))

    @property
    def total_files(self) -> int:
        with self._lock:
            return sum(self._counts.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)

    def __repr__(self) -> str:
        return f'SizeHistogram(buckets={len(self)}, files={self.total_files})'
