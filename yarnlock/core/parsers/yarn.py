"""Entry extraction for yarn lock files."""

from dataclasses import dataclass
from typing import Any, List, Optional, Set, Tuple, Union

from ...utils.logging import get_logger
from .base import (
    BaseParser,
    PackageParseFailureRecorder,
    YarnDependency,
    YarnEntry,
    YarnLockFile,
    YarnLockVersion,
)
from .blocks import Block, YarnBlockFile


NPM_ALIAS_PREFIX = "npm:"
VERSION_KEY = "version"
RESOLVED_KEY = "resolved"
DEPENDENCIES_TITLE = "dependencies"
OPTIONAL_DEPENDENCIES_TITLE = "optionalDependencies"


def normalize_version(version: str) -> str:
    """Put a version specifier in its ``npm:`` aliased form.

    Already aliased specifiers are returned unchanged, so normalizing twice is
    the same as normalizing once.
    """
    if version.startswith(NPM_ALIAS_PREFIX):
        return version
    return f"{NPM_ALIAS_PREFIX}{version}"


@dataclass(frozen=True)
class ParsedTitle:
    """A title member split into package name and version specifier."""

    name: str
    specifier: str


@dataclass(frozen=True)
class RejectedTitle:
    """A title member that could not be split."""

    member: str
    reason: str


TitleParseResult = Union[ParsedTitle, RejectedTitle]


def has_version_separator(member: str) -> bool:
    """Check for an unescaped ``@`` past the first character of a member.

    A leading ``@`` belongs to a scoped name, not to a version.
    """
    text = member.strip().strip('"')
    for index in range(1, len(text)):
        if text[index] == "@" and text[index - 1] != "\\":
            return True
    return False


def lookup_block_version(block: Block) -> Optional[str]:
    """Find the block's ``version`` value, ignoring key case."""
    for key, value in block.values.items():
        if key.casefold() == VERSION_KEY:
            return value
    return None


def normalize_title_member(member: str, version: Optional[str], logger: Any) -> str:
    """Give a versionless title member the version of its block.

    For stanzas such as::

        nyc:
          version "10.0.0"

    the member ``nyc`` becomes ``nyc@10.0.0``. Members that already carry a
    version, or whose block has none, are returned unchanged.

    Args:
        member: One comma separated piece of a block title
        version: The block's ``version`` value, if any
        logger: Receives a warning when the version is missing

    Returns:
        Member in ``name@specifier`` form where possible
    """
    if has_version_separator(member):
        return member

    if version is None:
        logger.warning("Block without version detected")
        return member

    bare = member.rstrip(":").strip('"')
    return f"{bare}@{version}"


def parse_title_member(member: str) -> TitleParseResult:
    """Split ``name@specifier`` (or ``@scope/name@specifier``).

    Args:
        member: A normalized title member

    Returns:
        ParsedTitle on success, RejectedTitle with the reason otherwise
    """
    working = member.rstrip(":").strip('"')

    scoped = working.startswith("@")
    if scoped:
        working = working.lstrip("@")

    parts = working.split("@")
    if len(parts) != 2:
        return RejectedTitle(member, f"expected one '@' separator, found {len(parts) - 1}")

    name, specifier = parts
    if not name:
        return RejectedTitle(member, "empty package name")
    if not specifier:
        return RejectedTitle(member, "empty version specifier")

    prefix = "@" if scoped else ""
    return ParsedTitle(name=f"{prefix}{name}", specifier=specifier)


class YarnLockParser(BaseParser):
    """Turns the blocks of a yarn lock file into package entries.

    Problems with a single stanza are logged and, for a missing ``version``,
    reported to the failure recorder; they never stop the remaining stanzas
    from being read.
    """

    def __init__(self, logger: Optional[Any] = None) -> None:
        """Initialize the yarn.lock entry parser."""
        super().__init__()
        self.parser_type = "yarn"
        self.supported_versions = [YarnLockVersion.V1, YarnLockVersion.V2]
        self.logger = logger or get_logger("YarnLockParser")

    def parse(
        self,
        recorder: PackageParseFailureRecorder,
        block_file: YarnBlockFile,
        logger: Optional[Any] = None,
    ) -> YarnLockFile:
        """Extract entries from the blocks of a lock file.

        Args:
            recorder: Receives the names of entries without a version
            block_file: Output of the block reader
            logger: Optional logger overriding the parser's own

        Returns:
            Lock file model with one entry per usable block, in block order

        Raises:
            ValueError: If no block file is given
        """
        if block_file is None:
            raise ValueError("block_file must not be None")

        logger = logger or self.logger
        entries: List[YarnEntry] = []

        for block in block_file:
            entry = self._parse_block(recorder, block, logger)
            if entry is not None:
                entries.append(entry)

        logger.debug(f"Extracted {len(entries)} of {len(block_file)} lock entries")
        return YarnLockFile(lock_version=block_file.lock_version, entries=tuple(entries))

    def _parse_block(
        self,
        recorder: PackageParseFailureRecorder,
        block: Block,
        logger: Any,
    ) -> Optional[YarnEntry]:
        name = ""
        satisfied: Set[str] = set()
        block_version = lookup_block_version(block)

        for member in (piece.strip() for piece in block.title.split(",")):
            result = parse_title_member(normalize_title_member(member, block_version, logger))
            if isinstance(result, RejectedTitle):
                logger.debug(f"Skipping title member {result.member!r}: {result.reason}")
                continue

            if not name:
                name = result.name
            elif result.name != name:
                logger.debug(f"Title member {member!r} names {result.name}, entry is {name}")

            satisfied.add(normalize_version(result.specifier))

        if not name.strip():
            logger.warning(f"Failed to read a name for block {block.title}. The entry will be skipped.")
            return None

        version = block.values.get(VERSION_KEY)
        if not version:
            logger.warning(f"Failed to read a version for {name}. The entry will be skipped.")
            recorder.register_package_parse_failure(name)
            return None

        return YarnEntry(
            name=name,
            version=version,
            satisfied=frozenset(satisfied),
            resolved=block.values.get(RESOLVED_KEY),
            dependencies=self._read_dependencies(block, DEPENDENCIES_TITLE, logger),
            optional_dependencies=self._read_dependencies(block, OPTIONAL_DEPENDENCIES_TITLE, logger),
        )

    def _read_dependencies(self, block: Block, title: str, logger: Any) -> Tuple[YarnDependency, ...]:
        """Read the dependency edges of the first child block called ``title``."""
        children = block.find_children(title)
        if not children:
            return ()
        if len(children) > 1:
            logger.warning(f"Block {block.title} has {len(children)} '{title}' sections, using the first")

        return tuple(
            YarnDependency(name=dep_name, version=normalize_version(specifier))
            for dep_name, specifier in children[0].values.items()
        )
