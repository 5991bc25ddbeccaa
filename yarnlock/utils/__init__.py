"""Utility functions and helpers for yarnlock."""

from .logging import setup_logging, get_logger
from .path_utils import PathResolver, find_lock_files, is_ignored_path

__all__ = [
    "setup_logging",
    "get_logger",
    "PathResolver",
    "find_lock_files",
    "is_ignored_path",
]
