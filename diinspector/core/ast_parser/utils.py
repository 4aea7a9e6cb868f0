"""AST Parser utilities.

Language detection, parser registry, and helper functions.
"""

import os
from typing import Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .base import BaseLanguageParser

# Extension → language mapping
SUPPORTED_EXTENSIONS: Dict[str, str] = {
    ".cs": "csharp",
    ".csx": "csharp",
}

# Parser registry, lazy-loaded so the grammar is only built on first use
_parser_registry: Dict[str, "BaseLanguageParser"] = {}


def detect_language(file_path: str) -> Optional[str]:
    """Detect programming language from file extension.

    Args:
        file_path: Path to the source file

    Returns:
        Language identifier string or None if unsupported
    """
    _, ext = os.path.splitext(file_path)
    return SUPPORTED_EXTENSIONS.get(ext.lower())


def get_parser(language: str) -> "BaseLanguageParser":
    """Get the shared parser instance for the given language.

    Parser instances hold only grammar-level data, so one per language is
    reused by every caller.

    Args:
        language: Language identifier (e.g., "csharp")

    Returns:
        Parser instance

    Raises:
        ValueError: If language is not supported
    """
    if language not in _parser_registry:
        if language == "csharp":
            from .csharp_parser import CSharpParser
            _parser_registry["csharp"] = CSharpParser()
        else:
            raise ValueError(
                f"Unsupported language: {language}. "
                f"Supported: {sorted(set(SUPPORTED_EXTENSIONS.values()))}"
            )

    return _parser_registry[language]


def is_supported_file(file_path: str) -> bool:
    """Check if a file has a supported language extension.

    Args:
        file_path: Path to the file

    Returns:
        True if file type is supported for analysis
    """
    return detect_language(file_path) is not None
