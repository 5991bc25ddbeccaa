"""Detector wiring lock file discovery, reading and entry extraction."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from ..utils.logging import get_logger
from ..utils.path_utils import PathResolver, find_lock_files
from .parsers import ParserRegistry, YarnBlockReader, YarnLockFile, registry as default_registry
from .recorder import SingleFileRecorder


@dataclass
class DetectionResult:
    """Outcome of scanning one lock file."""

    location: Path
    recorder: SingleFileRecorder
    lock_file: Optional[YarnLockFile] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.lock_file is not None


class YarnLockDetector:
    """Reads yarn lock files and extracts their entries.

    Each file gets its own recorder. Files that cannot be read, or whose
    dialect no registered parser supports, produce a result without a lock
    file instead of an exception.
    """

    def __init__(
        self,
        parser_registry: Optional[ParserRegistry] = None,
        reader: Optional[YarnBlockReader] = None,
        resolver: Optional[PathResolver] = None,
        logger: Optional[Any] = None,
    ) -> None:
        """Initialize the detector.

        Args:
            parser_registry: Registry to pick entry parsers from
            reader: Block reader for the raw text
            resolver: Path resolver for physical file locations
            logger: Logger for file level problems
        """
        self.registry = parser_registry or default_registry
        self.logger = logger or get_logger("YarnLockDetector")
        self.reader = reader or YarnBlockReader(logger=self.logger)
        self.resolver = resolver or PathResolver()

    def scan_file(self, file_path: Path) -> DetectionResult:
        """Parse a single lock file.

        Args:
            file_path: Path to the lock file

        Returns:
            Detection result with the lock file model when parsing succeeded
        """
        location = Path(self.resolver.resolve_physical_path(file_path))
        recorder = SingleFileRecorder(location=location)

        try:
            content = location.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Could not read lock file {location}: {e}")
            return DetectionResult(location=location, recorder=recorder, error=str(e))

        block_file = self.reader.read(content)
        lock_file = self.registry.parse_block_file(recorder, block_file, self.logger)
        if lock_file is None:
            message = f"No parser supports {block_file.lock_version.value} lock files"
            self.logger.warning(f"{message}: {location}")
            return DetectionResult(location=location, recorder=recorder, error=message)

        self.logger.debug(f"Parsed {len(lock_file.entries)} entries from {location}")
        return DetectionResult(location=location, recorder=recorder, lock_file=lock_file)

    def scan_directory(
        self,
        root_path: Path,
        ignore_patterns: Optional[List[str]] = None,
    ) -> List[DetectionResult]:
        """Parse every lock file below a directory.

        Args:
            root_path: Directory (or single lock file) to scan
            ignore_patterns: Additional ignore patterns

        Returns:
            One result per lock file, sorted by path
        """
        lock_files = find_lock_files(root_path, ignore_patterns, self.resolver)
        self.logger.debug(f"Found {len(lock_files)} lock files under {root_path}")
        return [self.scan_file(lock_file) for lock_file in lock_files]
