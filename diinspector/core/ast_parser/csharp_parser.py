"""C# AST parser using tree-sitter.

Walks the tree-sitter AST to collect interface and class names and to
extract constructor declarations (including C# 12 primary constructors)
with their ordered parameter lists.
"""

import logging
from typing import List, Optional

import tree_sitter
import tree_sitter_c_sharp

from ..constants import (
    CLASS_DECLARATION,
    CONSTRUCTOR_DECLARATION,
    INTERFACE_DECLARATION,
    PARAMETER_KINDS,
    PARAMETER_LIST,
    TYPE_DECLARATIONS,
    TYPE_NODE_KINDS,
    TYPE_NODE_KINDS_BEFORE_NAME,
    UNKNOWN_TYPE,
)
from .base import BaseLanguageParser
from .models import ConstructorParameter, ConstructorRecord, DeclarationSets

logger = logging.getLogger(__name__)

_CSHARP_LANGUAGE = tree_sitter.Language(tree_sitter_c_sharp.language())


def resolve_parameter_type(node: tree_sitter.Node, source: bytes) -> str:
    """Return the declared type of a parameter node as text.

    Grammar versions shape "type with modifiers" differently, so this
    degrades step by step instead of failing:

    1. the `type` field;
    2. the first direct child that looks like a type;
    3. the last type-like child ending before the `name` field;
    4. "" (callers map it to the unknown sentinel).
    """
    type_node = node.child_by_field_name("type")
    if type_node is not None:
        return _text(type_node, source)

    for child in node.children:
        if child.type in TYPE_NODE_KINDS:
            return _text(child, source)

    name_node = node.child_by_field_name("name")
    name_start = name_node.start_byte if name_node is not None else node.end_byte
    found = ""
    for child in node.children:
        if child.end_byte <= name_start and child.type in TYPE_NODE_KINDS_BEFORE_NAME:
            found = _text(child, source)
    return found


def _text(node: tree_sitter.Node, source: bytes) -> str:
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace").strip()


class CSharpParser(BaseLanguageParser):
    """tree-sitter based C# parser.

    Extracts:
    - Interface declarations -> DeclarationSets.interfaces
    - Class declarations -> DeclarationSets.classes
    - Constructor declarations -> ConstructorRecord
    - Primary constructors (class Foo(IBar bar)) -> ConstructorRecord(is_primary=True)
    """

    def get_language(self) -> str:
        return "csharp"

    def get_tree_sitter_language(self) -> tree_sitter.Language:
        return _CSHARP_LANGUAGE

    def collect_declarations(self, tree: tree_sitter.Tree, source: bytes) -> DeclarationSets:
        """Collect interface and class names, nested declarations included."""
        root = tree.root_node
        declarations = DeclarationSets()
        for node in self.finder.find(root, INTERFACE_DECLARATION):
            name = self._get_child_text(node, "name", source)
            if name:
                declarations.interfaces.add(name)
        for node in self.finder.find(root, CLASS_DECLARATION):
            name = self._get_child_text(node, "name", source)
            if name:
                declarations.classes.add(name)
        return declarations

    def extract_constructors(
        self, tree: tree_sitter.Tree, source: bytes
    ) -> List[ConstructorRecord]:
        """Extract constructor records for every class in the unit."""
        records: List[ConstructorRecord] = []
        for class_node in self.finder.find(tree.root_node, CLASS_DECLARATION):
            class_name = self._get_child_text(class_node, "name", source) or ""

            primary = self._extract_primary_constructor(class_node, class_name, source)
            if primary:
                records.append(primary)

            for ctor_node in self.finder.find(class_node, CONSTRUCTOR_DECLARATION):
                # Constructors of nested types are reported under the nested type
                owner_node = self._enclosing_type(ctor_node)
                if owner_node is None or owner_node.id != class_node.id:
                    continue
                records.append(self._extract_constructor(ctor_node, class_name, source))

        logger.debug(f"Extracted {len(records)} constructor(s)")
        return records

    # =========================================================================
    # Constructor extractors
    # =========================================================================

    def _extract_constructor(
        self, node: tree_sitter.Node, class_name: str, source: bytes
    ) -> ConstructorRecord:
        """Extract a constructor declaration."""
        owner = class_name or self._get_child_text(node, "name", source) or ""
        param_list = node.child_by_field_name("parameters")
        if param_list is None:
            param_list = self._get_child_by_type(node, PARAMETER_LIST)

        return ConstructorRecord(
            class_name=owner,
            parameters=self._extract_parameters(param_list, source),
            start_byte=node.start_byte,
            end_byte=node.end_byte,
        )

    def _extract_primary_constructor(
        self, node: tree_sitter.Node, class_name: str, source: bytes
    ) -> Optional[ConstructorRecord]:
        """Extract a C# 12 primary constructor.

        The parameter_list hangs directly off the class declaration and is
        not a named field, so it is found by kind.
        """
        param_list = self._get_child_by_type(node, PARAMETER_LIST)
        if param_list is None:
            return None

        return ConstructorRecord(
            class_name=class_name,
            parameters=self._extract_parameters(param_list, source),
            start_byte=node.start_byte,
            end_byte=param_list.end_byte,
            is_primary=True,
        )

    def _extract_parameters(
        self, param_list: Optional[tree_sitter.Node], source: bytes
    ) -> List[ConstructorParameter]:
        """Extract parameters in declaration order.

        Nameless parameters are dropped. A parameter whose type cannot be
        resolved is kept with the unknown sentinel so arity stays correct.
        """
        if param_list is None:
            return []

        parameters: List[ConstructorParameter] = []
        for child in param_list.named_children:
            if child.type not in PARAMETER_KINDS:
                continue
            name = self._get_child_text(child, "name", source)
            if not name:
                continue
            param_type = resolve_parameter_type(child, source)
            parameters.append(ConstructorParameter(
                type=param_type or UNKNOWN_TYPE,
                name=name,
                start_byte=child.start_byte,
                end_byte=child.end_byte,
            ))
        return parameters

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _get_child_text(node: tree_sitter.Node, field_name: str, source: bytes) -> Optional[str]:
        child = node.child_by_field_name(field_name)
        if child:
            return _text(child, source)
        return None

    @staticmethod
    def _get_child_by_type(node: tree_sitter.Node, type_name: str) -> Optional[tree_sitter.Node]:
        for child in node.children:
            if child.type == type_name:
                return child
        return None

    @staticmethod
    def _enclosing_type(node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
        """Return the nearest type declaration containing a node."""
        parent = node.parent
        while parent is not None:
            if parent.type in TYPE_DECLARATIONS:
                return parent
            parent = parent.parent
        return None
