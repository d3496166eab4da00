"""Utility functions for FileStats"""

import logging
import os
from pathlib import Path


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_int_env(key: str) -> int:
    """Get integer value from environment variable, return 0 if not set or invalid."""
    val = os.getenv(key)
    if val is None:
        return 0
    try:
        return int(val)
    except ValueError:
        return 0


def get_str_env(key: str, default: str) -> str:
    """
    Get string from environment variable, return default if not set.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        String value or default
    """
    return os.getenv(key, default)


def get_bool_env(key: str, default: bool) -> bool:
    """
    Get boolean from environment variable, return default if not set.

    Recognizes: true/false, yes/no, 1/0 (case-insensitive)

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Boolean value or default
    """
    val = os.getenv(key)
    if val is None:
        return default
    val_lower = val.lower()
    if val_lower in ('true', 'yes', '1'):
        return True
    elif val_lower in ('false', 'no', '0'):
        return False
    return default


def get_max_workers() -> int:
    """Default worker pool size from FILESTATS_MAX_WORKERS (0 = unbounded fan-out)."""
    return max(get_int_env('FILESTATS_MAX_WORKERS'), 0)


def get_output_dir() -> Path:
    """Directory where reports are written.

    Priority:
    1. FILESTATS_OUTPUT_DIR environment variable (if set)
    2. Current working directory
    """
    output_dir = os.environ.get('FILESTATS_OUTPUT_DIR')
    if output_dir:
        return Path(output_dir)
    return Path.cwd()


def setup_logging(default_level: str = 'WARNING') -> int:
    """Configure root logging from FILESTATS_LOG_LEVEL. Returns the level used."""
    level_name = get_str_env('FILESTATS_LOG_LEVEL', default_level).upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = getattr(logging, default_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    return level


def human_readable_size(size_bytes: int) -> str:
    """Convert bytes to human-readable format."""
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size_bytes < 1024:
            return f'{size_bytes:.2f} {unit}'
        size_bytes /= 1024
    return f'{size_bytes:.2f} PB'
