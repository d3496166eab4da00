"""Pytest configuration and shared fixtures for FileStats tests.

Provides an auto-use fixture that keeps reports out of the working
directory, and helpers for building synthetic directory trees.
"""

import os

import pytest


@pytest.fixture(autouse=True)
def isolate_output_directory(monkeypatch, tmp_path_factory):
    """Auto-use fixture that points FILESTATS_OUTPUT_DIR at a temp directory.

    This ensures tests never drop FileStats_*.xlsx files into the
    current working directory.
    """
    output_dir = tmp_path_factory.mktemp('filestats_output')
    monkeypatch.setenv('FILESTATS_OUTPUT_DIR', str(output_dir))
    monkeypatch.delenv('FILESTATS_MAX_WORKERS', raising=False)
    monkeypatch.delenv('FILESTATS_COLOR', raising=False)
    monkeypatch.delenv('FILESTATS_LOG_LEVEL', raising=False)
    yield output_dir


@pytest.fixture
def output_dir(isolate_output_directory):
    """Path of the isolated report directory for this test."""
    return isolate_output_directory


def write_file(path, size: int):
    """Create a file of exactly ``size`` bytes, creating parent dirs."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'wb') as f:
        f.write(b'x' * size)


def make_tree(root, files: dict[str, int]):
    """Create files under root from a {relative_path: size_bytes} mapping.

    Returns:
        dict of expected bucket -> count
    """
    expected: dict[int, int] = {}
    for rel_path, size in files.items():
        write_file(os.path.join(str(root), rel_path), size)
        bucket = size // 1024
        expected[bucket] = expected.get(bucket, 0) + 1
    return expected
