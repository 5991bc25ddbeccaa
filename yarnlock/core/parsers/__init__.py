"""Yarn lock file readers and entry parsers."""

from .base import (
    BaseParser,
    PackageParseFailureRecorder,
    YarnDependency,
    YarnEntry,
    YarnLockFile,
    YarnLockVersion,
)
from .blocks import Block, ReaderConfig, YarnBlockFile, YarnBlockReader, read_block_file
from .yarn import YarnLockParser, normalize_version
from .registry import ParserRegistry

# Register built-in parsers
registry = ParserRegistry()
registry.register("yarn", YarnLockParser())

__all__ = [
    "BaseParser",
    "Block",
    "PackageParseFailureRecorder",
    "ParserRegistry",
    "ReaderConfig",
    "YarnBlockFile",
    "YarnBlockReader",
    "YarnDependency",
    "YarnEntry",
    "YarnLockFile",
    "YarnLockParser",
    "YarnLockVersion",
    "normalize_version",
    "read_block_file",
    "registry",
]
