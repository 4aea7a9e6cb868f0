"""Base interface for language-specific AST parsers.

Defines the Strategy pattern base class that language parsers implement.
Shared parsing logic lives here; declaration and constructor extraction
is delegated.
"""

import logging
from abc import ABC, abstractmethod
from typing import List

import tree_sitter

from ..constants import PARSE_ERROR_WARNING
from .models import ConstructorRecord, DeclarationSets, ParseError, ParseResult
from .tree_query import DescendantFinder, make_finder

logger = logging.getLogger(__name__)


class BaseLanguageParser(ABC):
    """Abstract base for language-specific tree-sitter parsers.

    Subclasses implement:
    - get_language(): returns language name string
    - get_tree_sitter_language(): returns tree-sitter Language object
    - collect_declarations(): gathers interface/class names from the AST
    - extract_constructors(): walks the AST and extracts ConstructorRecords

    The parser object itself is stateless between parses: every call to
    parse_source() builds a fresh tree_sitter.Parser and the resulting tree
    belongs to the returned ParseResult alone.
    """

    def __init__(self):
        self._finder: DescendantFinder = make_finder(self.get_tree_sitter_language())

    @property
    def finder(self) -> DescendantFinder:
        return self._finder

    @abstractmethod
    def get_language(self) -> str:
        """Return the language identifier (e.g., 'csharp')."""
        ...

    @abstractmethod
    def get_tree_sitter_language(self) -> tree_sitter.Language:
        """Return the tree-sitter Language object for this language."""
        ...

    @abstractmethod
    def collect_declarations(self, tree: tree_sitter.Tree, source: bytes) -> DeclarationSets:
        """Collect declared interface and class names.

        Args:
            tree: Parsed tree-sitter tree
            source: Raw source bytes

        Returns:
            DeclarationSets with both name sets filled
        """
        ...

    @abstractmethod
    def extract_constructors(
        self, tree: tree_sitter.Tree, source: bytes
    ) -> List[ConstructorRecord]:
        """Extract every constructor declaration from a parsed AST.

        Args:
            tree: Parsed tree-sitter tree
            source: Raw source bytes

        Returns:
            ConstructorRecords in document order
        """
        ...

    def parse_source(self, source_text: str, file_path: str = "<memory>") -> ParseResult:
        """Parse source code string into a ParseResult.

        Syntax errors never raise: tree-sitter always returns a tree, and
        error nodes are reported as a warning on the result.

        Args:
            source_text: Source code as string
            file_path: File path (for metadata)

        Returns:
            ParseResult owning the parsed tree
        """
        errors: List[ParseError] = []
        # Lone surrogates cannot be encoded; replace keeps offsets consistent
        source_bytes = source_text.encode("utf-8", errors="replace")

        parser = tree_sitter.Parser(self.get_tree_sitter_language())
        tree = parser.parse(source_bytes)

        has_error = tree.root_node.has_error
        if has_error:
            errors.append(
                ParseError(
                    file_path=file_path,
                    line=0,
                    message=PARSE_ERROR_WARNING,
                    severity="warning",
                )
            )
            logger.debug(f"Tree-sitter reported parse errors in {file_path}")

        return ParseResult(
            file_path=file_path,
            language=self.get_language(),
            tree=tree,
            source=source_bytes,
            has_error=has_error,
            errors=errors,
        )
