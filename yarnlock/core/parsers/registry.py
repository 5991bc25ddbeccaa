"""Plugin registry system for lock file parsers."""

from typing import Any, Dict, List, Optional, Type

from .base import BaseParser, PackageParseFailureRecorder, YarnLockFile, YarnLockVersion
from .blocks import YarnBlockFile


class ParserRegistry:
    """Registry of entry parsers, selected by the lock dialect they support."""

    def __init__(self) -> None:
        """Initialize the parser registry."""
        self._parsers: Dict[str, BaseParser] = {}

    def register(self, parser_type: str, parser: BaseParser) -> None:
        """Register a parser under a name.

        Args:
            parser_type: Parser name (e.g., 'yarn')
            parser: Parser instance to register
        """
        self._parsers[parser_type] = parser

    def get_parser(self, parser_type: str) -> Optional[BaseParser]:
        """Get a parser by name.

        Args:
            parser_type: Parser name

        Returns:
            Parser instance or None if not found
        """
        return self._parsers.get(parser_type)

    def find_parser_for_version(self, lock_version: YarnLockVersion) -> Optional[BaseParser]:
        """Find the first registered parser that understands a dialect.

        Args:
            lock_version: Dialect detected by the block reader

        Returns:
            Parser that can handle the dialect or None
        """
        for parser in self._parsers.values():
            if parser.can_parse(lock_version):
                return parser
        return None

    def get_supported_versions(self) -> List[YarnLockVersion]:
        """Get the dialects at least one parser supports.

        Returns:
            Dialects in enum order
        """
        return [
            version for version in YarnLockVersion
            if any(parser.can_parse(version) for parser in self._parsers.values())
        ]

    def get_supported_parser_types(self) -> List[str]:
        return list(self._parsers.keys())

    def parse_block_file(
        self,
        recorder: PackageParseFailureRecorder,
        block_file: YarnBlockFile,
        logger: Optional[Any] = None,
    ) -> Optional[YarnLockFile]:
        """Parse a block file using the appropriate parser.

        Args:
            recorder: Receives packages that failed to parse
            block_file: Output of the block reader
            logger: Optional logger passed on to the parser

        Returns:
            Extracted lock file or None if no parser supports the dialect
        """
        parser = self.find_parser_for_version(block_file.lock_version)
        if parser:
            return parser.parse(recorder, block_file, logger)
        return None


class ParserDecorator:
    """Decorator for registering parsers."""

    def __init__(self, registry: ParserRegistry, parser_type: str) -> None:
        """Initialize the decorator.

        Args:
            registry: Parser registry instance
            parser_type: Parser name
        """
        self.registry = registry
        self.parser_type = parser_type

    def __call__(self, parser_class: Type[BaseParser]) -> Type[BaseParser]:
        """Register the parser class.

        Args:
            parser_class: Parser class to register

        Returns:
            The original parser class
        """
        parser_instance = parser_class()
        self.registry.register(self.parser_type, parser_instance)
        return parser_class


def register_parser(parser_type: str, registry: Optional[ParserRegistry] = None) -> ParserDecorator:
    """Decorator factory for registering parsers.

    Args:
        parser_type: Parser name
        registry: Parser registry instance (uses global registry if None)

    Returns:
        Decorator function
    """
    if registry is None:
        # Use global registry
        from . import registry as global_registry
        registry = global_registry

    return ParserDecorator(registry, parser_type)
