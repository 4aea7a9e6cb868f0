"""diinspector AST Parser — tree-sitter based C# parsing.

Public API:
    parse_source(source, file_path, language) → ParseResult
    detect_language(file_path) → str | None
    get_parser(language) → BaseLanguageParser
"""

from .models import (
    ConstructorParameter,
    ConstructorRecord,
    DeclarationSets,
    ParseError,
    ParseResult,
)
from .utils import detect_language, get_parser, is_supported_file

__all__ = [
    "parse_source",
    "detect_language",
    "get_parser",
    "is_supported_file",
    "ConstructorParameter",
    "ConstructorRecord",
    "DeclarationSets",
    "ParseError",
    "ParseResult",
]


def parse_source(source_text: str, file_path: str = "<memory>", language: str = "csharp") -> ParseResult:
    """Parse source code string into a ParseResult.

    Args:
        source_text: Source code as string
        file_path: File path (for metadata)
        language: Language identifier

    Returns:
        ParseResult owning the parsed tree

    Raises:
        ValueError: If language is not supported
    """
    return get_parser(language).parse_source(source_text, file_path)
