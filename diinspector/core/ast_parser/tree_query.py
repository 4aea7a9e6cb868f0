"""Descendant search by node kind.

Two interchangeable strategies behind one interface:

- QueryCursorFinder: compiles a `(kind) @node` tree-sitter query and runs it
  with `tree_sitter.QueryCursor` (py-tree-sitter >= 0.25).
- RecursiveFinder: iterative pre-order walk over `node.children`.

`make_finder()` picks one by probing the installed binding. Both return
matches in document pre-order, including the start node itself when it
matches.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List

import tree_sitter

logger = logging.getLogger(__name__)

_HAS_QUERY_CURSOR = hasattr(tree_sitter, "QueryCursor") and hasattr(tree_sitter, "Query")


class DescendantFinder(ABC):
    """Find all nodes of a given kind under (and including) a node."""

    @abstractmethod
    def find(self, node: tree_sitter.Node, kind: str) -> List[tree_sitter.Node]:
        ...


class RecursiveFinder(DescendantFinder):
    """Manual pre-order traversal. Works with any binding version."""

    def find(self, node: tree_sitter.Node, kind: str) -> List[tree_sitter.Node]:
        found: List[tree_sitter.Node] = []
        stack = [node]
        while stack:
            current = stack.pop()
            if current.type == kind:
                found.append(current)
            # Reversed so the leftmost child is visited first
            stack.extend(reversed(current.children))
        return found


class QueryCursorFinder(DescendantFinder):
    """Indexed lookup through compiled tree-sitter queries.

    Queries are compiled lazily and cached per kind; the cache only ever
    grows with grammar-level data, so it is safe to share.
    """

    def __init__(self, language: tree_sitter.Language):
        self._language = language
        self._queries: Dict[str, "tree_sitter.Query"] = {}

    def _query_for(self, kind: str) -> "tree_sitter.Query":
        query = self._queries.get(kind)
        if query is None:
            query = tree_sitter.Query(self._language, f"({kind}) @node")
            self._queries[kind] = query
        return query

    def find(self, node: tree_sitter.Node, kind: str) -> List[tree_sitter.Node]:
        cursor = tree_sitter.QueryCursor(self._query_for(kind))
        captures = cursor.captures(node)
        nodes = list(captures.get("node", []))
        # Pre-order: outer nodes before the nodes they contain
        nodes.sort(key=lambda n: (n.start_byte, -n.end_byte))
        return nodes


def make_finder(language: tree_sitter.Language) -> DescendantFinder:
    """Pick the fastest finder the installed tree-sitter binding supports."""
    if _HAS_QUERY_CURSOR:
        logger.debug("Using tree-sitter QueryCursor for descendant search")
        return QueryCursorFinder(language)
    logger.debug("tree-sitter QueryCursor unavailable, using recursive descendant search")
    return RecursiveFinder()
