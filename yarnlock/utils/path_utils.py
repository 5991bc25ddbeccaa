"""Path utilities for locating lock files and canonicalizing their paths."""

import os
import fnmatch
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from .logging import get_logger


LOCK_FILE_NAME = "yarn.lock"

PathLike = Union[str, Path]


class PathResolver:
    """Resolves symlinks to physical paths.

    Successful resolutions are memoized per instance, keyed by the input path
    string, for the lifetime of the resolver. Nothing is evicted.
    """

    def __init__(self, logger: Optional[Any] = None) -> None:
        self._resolved_paths: Dict[str, str] = {}
        self.logger = logger or get_logger("PathResolver")

    def resolve_physical_path(self, path: PathLike) -> str:
        """Return the canonical, symlink-free form of ``path``.

        Args:
            path: Path to resolve

        Returns:
            Resolved path, or ``path`` unchanged when it cannot be resolved
        """
        key = str(path)
        cached = self._resolved_paths.get(key)
        if cached is not None:
            return cached

        try:
            resolved = str(Path(key).resolve(strict=True))
        except (OSError, RuntimeError) as e:
            self.logger.debug(f"Could not resolve {key}: {e}")
            return key

        self._resolved_paths[key] = resolved
        return resolved

    def clear_cache(self) -> None:
        self._resolved_paths.clear()

    @property
    def cache_size(self) -> int:
        return len(self._resolved_paths)

    @staticmethod
    def get_parent_directory(path: PathLike) -> str:
        return os.path.dirname(str(path))

    def is_file_below_another(self, above_file_path: PathLike, below_file_path: PathLike) -> bool:
        """Check whether one file sits in a subdirectory of another file's directory.

        Args:
            above_file_path: File expected higher in the tree
            below_file_path: File expected deeper in the tree

        Returns:
            True if the directories differ and the second starts with the first
        """
        above_directory = self.get_parent_directory(above_file_path)
        below_directory = self.get_parent_directory(below_file_path)
        return len(above_directory) != len(below_directory) and below_directory.startswith(above_directory)

    @staticmethod
    def matches_pattern(search_pattern: str, file_name: str) -> bool:
        """Match a file name against ``*suffix``, ``prefix*`` or an exact name.

        Comparison ignores case.
        """
        pattern = search_pattern.lower()
        name = file_name.lower()
        if pattern.startswith("*") and name.endswith(pattern[1:]):
            return True
        if pattern.endswith("*") and name.startswith(pattern[:-1]):
            return True
        return pattern == name


class PathFilter:
    """Filters paths based on patterns and rules."""

    def __init__(self, ignore_patterns: Optional[List[str]] = None) -> None:
        """Initialize path filter.

        Args:
            ignore_patterns: Extra glob patterns to ignore on top of the defaults
        """
        self.ignore_patterns = [
            "**/node_modules/**",
            "**/.git/**",
            "**/.yarn/cache/**",
            "**/.yarn/unplugged/**",
            "**/.pnp/**",
            "**/dist/**",
            "**/build/**",
            *(ignore_patterns or []),
        ]

    def is_ignored(self, path: Path) -> bool:
        """Check if a path should be ignored.

        Args:
            path: Path to check

        Returns:
            True if path should be ignored
        """
        path_str = path.as_posix()

        for pattern in self.ignore_patterns:
            if fnmatch.fnmatch(path_str, pattern):
                return True

        return False

    def filter_paths(self, paths: Iterator[Path]) -> Iterator[Path]:
        """Filter paths based on ignore patterns.

        Args:
            paths: Iterator of paths to filter

        Yields:
            Paths that should not be ignored
        """
        for path in paths:
            if not self.is_ignored(path):
                yield path


class LockFileFinder:
    """Finds yarn lock files in a project directory."""

    def __init__(
        self,
        ignore_patterns: Optional[List[str]] = None,
        resolver: Optional[PathResolver] = None,
        search_pattern: str = LOCK_FILE_NAME,
    ) -> None:
        """Initialize lock file finder.

        Args:
            ignore_patterns: Additional ignore patterns
            resolver: Path resolver used to collapse symlinked duplicates
            search_pattern: File name pattern, see ``PathResolver.matches_pattern``
        """
        self.path_filter = PathFilter(ignore_patterns)
        self.resolver = resolver or PathResolver()
        self.search_pattern = search_pattern

    def find_lock_files(self, root_path: Path) -> List[Path]:
        """Find all lock files in a directory tree.

        Args:
            root_path: Root directory to search

        Returns:
            Lock file paths sorted by path, each physical file once

        Raises:
            ValueError: If the root does not exist
        """
        if not root_path.exists():
            raise ValueError(f"Root path does not exist: {root_path}")

        if root_path.is_file():
            candidates = [root_path]
        else:
            candidates = sorted(self._walk_files(root_path))

        seen = set()
        lock_files = []
        for file_path in candidates:
            if not self.resolver.matches_pattern(self.search_pattern, file_path.name):
                continue
            physical = self.resolver.resolve_physical_path(file_path)
            if physical in seen:
                continue
            seen.add(physical)
            lock_files.append(file_path)

        return lock_files

    def _walk_files(self, root_path: Path) -> Iterator[Path]:
        """Walk through files in directory tree.

        Args:
            root_path: Root directory to walk

        Yields:
            File paths that are not ignored
        """
        files = (file_path for file_path in root_path.rglob("*") if file_path.is_file())
        yield from self.path_filter.filter_paths(files)


def find_lock_files(
    root_path: Path,
    ignore_patterns: Optional[List[str]] = None,
    resolver: Optional[PathResolver] = None,
) -> List[Path]:
    """Convenience function to find lock files.

    Args:
        root_path: Root directory to search
        ignore_patterns: Additional ignore patterns
        resolver: Optional shared path resolver

    Returns:
        List of found lock files
    """
    finder = LockFileFinder(ignore_patterns, resolver)
    return finder.find_lock_files(root_path)


def is_ignored_path(path: Path, ignore_patterns: Optional[List[str]] = None) -> bool:
    """Check if a path should be ignored.

    Args:
        path: Path to check
        ignore_patterns: Additional ignore patterns

    Returns:
        True if path should be ignored
    """
    filter_obj = PathFilter(ignore_patterns)
    return filter_obj.is_ignored(path)
