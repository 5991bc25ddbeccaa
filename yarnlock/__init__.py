"""yarnlock - reads yarn lock files into package entries and dependency edges."""

__version__ = "0.1.0"

from .core.detector import DetectionResult, YarnLockDetector
from .core.parsers import (
    YarnBlockReader,
    YarnLockFile,
    YarnLockParser,
    normalize_version,
    read_block_file,
)
from .output.formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "DetectionResult",
    "YarnLockDetector",
    "YarnBlockReader",
    "YarnLockFile",
    "YarnLockParser",
    "normalize_version",
    "read_block_file",
    "ConsoleFormatter",
    "JSONFormatter",
]
