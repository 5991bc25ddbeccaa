"""Failure recording for a single lock file."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass
class SingleFileRecorder:
    """Collects the packages of one lock file that could not be parsed.

    Names are kept in report order; repeated reports are kept as well.
    """

    location: Path
    failed_packages: List[str] = field(default_factory=list)

    def register_package_parse_failure(self, package_name: str) -> None:
        """Record a package whose lock entry was unusable.

        Args:
            package_name: Name inferred from the entry's title
        """
        self.failed_packages.append(package_name)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_packages)
