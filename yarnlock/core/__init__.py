"""Core lock file parsing for yarnlock."""

from .detector import DetectionResult, YarnLockDetector
from .parsers import ParserRegistry, YarnEntry, YarnLockFile, YarnLockParser, registry
from .recorder import SingleFileRecorder

__all__ = [
    "DetectionResult",
    "ParserRegistry",
    "SingleFileRecorder",
    "YarnEntry",
    "YarnLockDetector",
    "YarnLockFile",
    "YarnLockParser",
    "registry",
]
