"""AST Parser data models.

Defines the data structures recovered from a parsed C# unit.
These are pure data containers — no parsing logic.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set

import tree_sitter


@dataclass
class ConstructorParameter:
    """A single constructor parameter as declared in source."""

    type: str  # "ILogger", "List<int>", "Foo?", or "unknown"
    name: str  # "logger"
    start_byte: int
    end_byte: int


@dataclass
class ConstructorRecord:
    """One constructor declaration and its ordered parameters.

    A class with several constructors yields several records sharing
    the same class_name.
    """

    class_name: str
    parameters: List[ConstructorParameter]
    start_byte: int
    end_byte: int
    is_primary: bool = False  # C# 12: class Foo(IBar bar) { }


@dataclass
class DeclarationSets:
    """Interface and class names declared anywhere in one unit."""

    interfaces: Set[str] = field(default_factory=set)
    classes: Set[str] = field(default_factory=set)


@dataclass
class ParseError:
    """An error encountered during parsing."""

    file_path: str
    line: int
    message: str
    severity: str = "warning"  # "warning" | "error"


@dataclass
class ParseResult:
    """Complete parse output for a single unit.

    Owns the tree-sitter tree; nothing else holds a reference to it.
    """

    file_path: str
    language: str
    tree: Optional[tree_sitter.Tree]
    source: bytes
    has_error: bool = False  # tree contains ERROR or MISSING nodes
    errors: List[ParseError] = field(default_factory=list)
