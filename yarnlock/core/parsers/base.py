"""Base parser class and data models for yarn lock parsing."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Protocol, Set, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .blocks import YarnBlockFile


class YarnLockVersion(Enum):
    """Lock file dialects."""

    V1 = "v1"  # classic, "# yarn lockfile v1"
    V2 = "v2"  # berry, "__metadata" based


class PackageParseFailureRecorder(Protocol):
    """Receives the names of packages whose lock entries could not be read."""

    def register_package_parse_failure(self, package_name: str) -> None:
        ...


@dataclass(frozen=True)
class YarnDependency:
    """A dependency edge declared by a lock entry."""

    name: str
    version: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Dependency name cannot be empty")


@dataclass(frozen=True)
class YarnEntry:
    """One resolved package stanza of a yarn lock file."""

    name: str
    version: str
    satisfied: FrozenSet[str] = frozenset()
    resolved: Optional[str] = None
    dependencies: Tuple[YarnDependency, ...] = ()
    optional_dependencies: Tuple[YarnDependency, ...] = ()

    def __post_init__(self) -> None:
        """Validate the entry."""
        if not self.name:
            raise ValueError("Entry name cannot be empty")
        if not self.version:
            raise ValueError(f"Entry {self.name} has no version")

    @property
    def is_scoped(self) -> bool:
        return self.name.startswith("@")

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form of the entry, satisfied specifiers sorted."""
        return {
            "name": self.name,
            "version": self.version,
            "satisfied": sorted(self.satisfied),
            "resolved": self.resolved,
            "dependencies": [
                {"name": dep.name, "version": dep.version} for dep in self.dependencies
            ],
            "optionalDependencies": [
                {"name": dep.name, "version": dep.version} for dep in self.optional_dependencies
            ],
        }


@dataclass(frozen=True)
class YarnLockFile:
    """Entries extracted from one lock file, in source order."""

    lock_version: YarnLockVersion
    entries: Tuple[YarnEntry, ...] = field(default_factory=tuple)

    def get_entry_names(self) -> Set[str]:
        """Get set of entry names.

        Returns:
            Set of package names
        """
        return {entry.name for entry in self.entries}

    def find_entry(self, name: str) -> Optional[YarnEntry]:
        """Find the first entry for a package name.

        Args:
            name: Package name to find

        Returns:
            Entry if found, None otherwise
        """
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None

    def find_entries(self, name: str) -> List[YarnEntry]:
        """All entries for a package name; one per resolved version."""
        return [entry for entry in self.entries if entry.name == name]


class BaseParser(ABC):
    """Abstract base class for lock file entry extractors."""

    def __init__(self) -> None:
        """Initialize the parser."""
        self.supported_versions: List[YarnLockVersion] = []
        self.parser_type: str = ""

    def can_parse(self, lock_version: YarnLockVersion) -> bool:
        """Check if this parser understands the given lock dialect.

        Args:
            lock_version: Dialect detected by the block reader

        Returns:
            True if parser can handle the dialect
        """
        return lock_version in self.supported_versions

    @abstractmethod
    def parse(
        self,
        recorder: PackageParseFailureRecorder,
        block_file: "YarnBlockFile",
        logger: Optional[Any] = None,
    ) -> YarnLockFile:
        """Extract entries from a block file.

        Args:
            recorder: Receives packages that failed to parse
            block_file: Output of the block reader
            logger: Optional logger overriding the parser's own

        Returns:
            Extracted lock file model
        """
        pass
