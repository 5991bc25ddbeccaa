"""Block reader for yarn lock files.

Turns the indentation-structured text of ``yarn.lock`` into a tree of titled
key/value blocks. The classic format::

    # yarn lockfile v1

    "@babel/code-frame@^7.0.0", "@babel/code-frame@^7.10.4":
      version "7.10.4"
      dependencies:
        "@babel/highlight" "^7.10.4"

and the berry format (``key: value`` pairs plus a ``__metadata`` stanza) share
the same block structure, so one reader handles both.
"""

import json
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ...utils.logging import get_logger
from .base import YarnLockVersion


V1_PRAGMA = "# yarn lockfile v1"
V2_PRAGMA = re.compile(r'^#\s*This file is generated by running "yarn install"', re.IGNORECASE)
METADATA_TITLE = "__metadata"


@dataclass(frozen=True)
class Block:
    """One titled unit of a lock file, possibly with nested blocks."""

    title: str
    values: Mapping[str, str] = field(default_factory=dict)
    children: Tuple["Block", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))
        object.__setattr__(self, "children", tuple(self.children))

    def find_children(self, title: str) -> List["Block"]:
        """Direct children whose title matches ``title`` case-insensitively."""
        wanted = title.casefold()
        return [child for child in self.children if child.title.casefold() == wanted]

    def find_child(self, title: str) -> Optional["Block"]:
        matches = self.find_children(title)
        return matches[0] if matches else None


@dataclass(frozen=True)
class YarnBlockFile:
    """Blocks read from one lock file together with its dialect."""

    lock_version: YarnLockVersion
    blocks: Tuple[Block, ...] = ()
    metadata: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "blocks", tuple(self.blocks))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)


@dataclass
class ReaderConfig:
    """Configuration for the block reader."""

    indent_width: int = 2
    quote_chars: str = '"'

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.indent_width < 1:
            raise ValueError(f"Indent width must be positive: {self.indent_width}")
        if not self.quote_chars:
            raise ValueError("At least one quote character is required")


class _BlockBuilder:
    """Mutable stand-in for a Block while its stanza is still being read."""

    def __init__(self, title: str) -> None:
        self.title = title
        self.values: Dict[str, str] = {}
        self.children: List["_BlockBuilder"] = []

    def build(self) -> Block:
        return Block(
            title=self.title,
            values=self.values,
            children=tuple(child.build() for child in self.children),
        )


class YarnBlockReader:
    """Reads lock file text into a YarnBlockFile.

    Malformed lines never abort the read: each one is reported as a warning
    and skipped, and reading resumes at the next line that fits the structure.
    """

    def __init__(self, config: Optional[ReaderConfig] = None, logger: Optional[Any] = None) -> None:
        """Initialize the reader.

        Args:
            config: Indentation and quoting settings
            logger: Logger for structural warnings
        """
        self.config = config or ReaderConfig()
        self.logger = logger or get_logger("YarnBlockReader")

    def read(self, content: str, logger: Optional[Any] = None) -> YarnBlockFile:
        """Read the full text of a lock file.

        Args:
            content: Lock file text
            logger: Optional logger overriding the reader's own

        Returns:
            Dialect plus top-level blocks in source order
        """
        logger = logger or self.logger
        lines = self._normalize_newlines(content).split("\n")
        lock_version = self.detect_version(lines)

        stanzas: List[_BlockBuilder] = []
        metadata: Optional[_BlockBuilder] = None
        # stack[i] is the open block at depth i; its own lines sit at level i + 1
        stack: List[_BlockBuilder] = []

        for line_number, raw in enumerate(lines, 1):
            stripped = raw.strip()
            if not stripped or stripped.startswith("#"):
                continue

            indent = self._measure_indent(raw, line_number, logger)
            if indent is None:
                continue
            level = indent // self.config.indent_width

            if level == 0:
                if not stripped.endswith(":"):
                    logger.warning(
                        f"Line {line_number}: expected a stanza title ending in ':', "
                        f"skipping until the next stanza"
                    )
                    stack = []
                    continue
                builder = _BlockBuilder(stripped[:-1].strip())
                if builder.title == METADATA_TITLE:
                    metadata = builder
                else:
                    stanzas.append(builder)
                stack = [builder]
                continue

            if not stack:
                logger.warning(f"Line {line_number}: indented line outside of any stanza, skipping")
                continue
            if level > len(stack):
                logger.warning(f"Line {line_number}: unexpected indentation, skipping")
                continue

            del stack[level:]
            parent = stack[-1]

            if stripped.endswith(":"):
                child = _BlockBuilder(self._unquote(stripped[:-1].strip()))
                parent.children.append(child)
                stack.append(child)
                continue

            pair = self._split_pair(stripped)
            if pair is None:
                logger.warning(f"Line {line_number}: malformed or missing value in '{stripped}', skipping")
                continue

            key, value = pair
            if key in parent.values:
                logger.debug(f"Line {line_number}: duplicate key '{key}' in '{parent.title}' ignored")
                continue
            parent.values[key] = value

        blocks = tuple(builder.build() for builder in stanzas)
        logger.debug(f"Read {len(blocks)} blocks from a {lock_version.value} lock file")

        return YarnBlockFile(
            lock_version=lock_version,
            blocks=blocks,
            metadata=metadata.values if metadata else {},
        )

    def detect_version(self, lines: List[str]) -> YarnLockVersion:
        """Work out the lock file dialect.

        The leading comment lines are checked for a pragma first; without one a
        top-level ``__metadata`` stanza marks the berry format.

        Args:
            lines: Lock file lines, newlines already normalized

        Returns:
            Detected dialect, classic when nothing identifies it
        """
        for line in lines:
            stripped = line.strip()
            if not stripped:
                continue
            if not stripped.startswith("#"):
                break
            if stripped.lower() == V1_PRAGMA:
                return YarnLockVersion.V1
            if V2_PRAGMA.match(stripped):
                return YarnLockVersion.V2

        if any(line.rstrip() == f"{METADATA_TITLE}:" for line in lines):
            return YarnLockVersion.V2

        return YarnLockVersion.V1

    @staticmethod
    def _normalize_newlines(content: str) -> str:
        if content.startswith("\ufeff"):
            content = content[1:]
        return content.replace("\r\n", "\n").replace("\r", "\n")

    def _measure_indent(self, raw: str, line_number: int, logger: Any) -> Optional[int]:
        leading = raw[:len(raw) - len(raw.lstrip())]
        if "\t" in leading:
            logger.warning(f"Line {line_number}: tab indentation is not supported, skipping")
            return None
        if len(leading) % self.config.indent_width:
            logger.warning(
                f"Line {line_number}: indentation of {len(leading)} is not a multiple of "
                f"{self.config.indent_width}, skipping"
            )
            return None
        return len(leading)

    def _split_pair(self, line: str) -> Optional[Tuple[str, str]]:
        """Split ``key value`` (classic) or ``key: value`` (berry).

        Returns:
            Unquoted key and value, or None when either is missing or the
            value has text after its closing quote
        """
        if line[0] in self.config.quote_chars:
            end = self._closing_quote(line)
            if end is None:
                return None
            key = self._unquote(line[:end + 1])
            rest = line[end + 1:].strip()
            if rest.startswith(":"):
                rest = rest[1:].strip()
        else:
            parts = line.split(None, 1)
            key = parts[0]
            rest = parts[1].strip() if len(parts) > 1 else ""
            if key.endswith(":"):
                key = key[:-1]

        if not key or not rest:
            return None
        if rest[0] in self.config.quote_chars and self._closing_quote(rest) != len(rest) - 1:
            return None
        return key, self._unquote(rest)

    def _closing_quote(self, line: str) -> Optional[int]:
        quote = line[0]
        escaped = False
        for index in range(1, len(line)):
            char = line[index]
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                return index
        return None

    def _unquote(self, text: str) -> str:
        if len(text) >= 2 and text[0] in self.config.quote_chars and text[-1] == text[0]:
            if text[0] == '"':
                try:
                    return json.loads(text)
                except ValueError:
                    pass
            return text[1:-1]
        return text


def read_block_file(
    content: str,
    config: Optional[ReaderConfig] = None,
    logger: Optional[Any] = None,
) -> YarnBlockFile:
    """Convenience function to read lock file text.

    Args:
        content: Lock file text
        config: Optional reader configuration
        logger: Optional logger for structural warnings

    Returns:
        Blocks and dialect of the lock file
    """
    return YarnBlockReader(config, logger).read(content)
