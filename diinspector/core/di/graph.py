"""Constructor dependency graph and cycle detection.

The graph only tracks dependencies on classes declared in the same unit;
interface-typed and external parameters never become edges.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Set, Tuple

from ..ast_parser.models import ConstructorRecord

logger = logging.getLogger(__name__)


def build_dependency_graph(
    constructors: Iterable[ConstructorRecord], classes: Set[str]
) -> Dict[str, List[str]]:
    """Map each class to the in-unit classes its constructors depend on.

    Several constructors of one class merge into one list, first-seen order,
    no duplicates. Classes without such dependencies get no entry.
    """
    graph: Dict[str, List[str]] = {}
    for ctor in constructors:
        deps = [p.type for p in ctor.parameters if p.type in classes]
        if not deps:
            continue
        existing = graph.setdefault(ctor.class_name, [])
        for dep in deps:
            if dep not in existing:
                existing.append(dep)
    return graph


def cycle_key(cycle: List[str]) -> str:
    """Rotation- and direction-independent key of a closed cycle."""
    return ",".join(sorted(cycle[:-1]))


def find_cycles(graph: Dict[str, List[str]]) -> List[List[str]]:
    """Enumerate distinct cycles, one representative path per participant set.

    Depth-first search from every node with a fresh visited set, so a node
    explored under one start node is still tried as a start node itself.
    Cycles are closed: ["A", "B", "A"]; a self-loop is ["X", "X"].

    The walk keeps an explicit stack of (node, remaining deps) frames, so
    chain length is not bounded by the interpreter's recursion limit.
    """
    cycles: List[List[str]] = []
    seen: Set[str] = set()

    for start in graph:
        path: List[str] = []
        on_path: Set[str] = set()
        visited: Set[str] = set()
        stack: List[Tuple[str, Iterator[str]]] = []

        def enter(node: str) -> None:
            if node in on_path:
                idx = path.index(node)
                cycle = path[idx:] + [node]
                key = cycle_key(cycle)
                if key not in seen:
                    seen.add(key)
                    cycles.append(cycle)
                return
            if node in visited:
                return
            visited.add(node)
            path.append(node)
            on_path.add(node)
            stack.append((node, iter(graph.get(node, []))))

        enter(start)
        while stack:
            node, deps = stack[-1]
            dep = next(deps, None)
            if dep is None:
                stack.pop()
                path.pop()
                on_path.discard(node)
            else:
                enter(dep)

    if cycles:
        logger.debug(f"Found {len(cycles)} dependency cycle(s)")
    return cycles
