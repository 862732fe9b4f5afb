"""Cycle detection that tolerates hierarchical self-references.

A table whose foreign key points at itself (``employees.manager_id``) is a
valid hierarchical structure, not a cycle.  :func:`detect_cycles` therefore
reports only chains that pass through at least two distinct nodes.
"""

from __future__ import annotations

import logging

from sqlsmith.graph.dependency_graph import DependencyGraph

logger = logging.getLogger(__name__)


def detect_cycles(graph: DependencyGraph) -> list[list[str]]:
    """Return every genuine cycle found by a depth-first search.

    Nodes are explored in graph iteration order.  When a dependency is
    already on the active path, the path from its first occurrence to the
    current node is recorded and closed by repeating the dependency, e.g.
    ``["a", "c", "b", "a"]``.  A node leaves the path once fully explored
    but stays visited, so each node is expanded once.

    The search uses an explicit stack instead of recursion; long dependency
    chains cannot hit the interpreter's recursion limit.

    Parameters
    ----------
    graph:
        A graph built by :func:`~sqlsmith.graph.dependency_graph.build_graph`.

    Returns
    -------
    list[list[str]]
        Closed cycles.  Empty when the graph is acyclic apart from
        self-references.  Which cycles are reported when several overlap
        depends on iteration order; only their presence is meaningful.
    """
    visited: set[str] = set()
    on_path: set[str] = set()
    path: list[str] = []
    cycles: list[list[str]] = []

    for root in graph:
        if root in visited:
            continue

        visited.add(root)
        on_path.add(root)
        path.append(root)
        stack = [(root, iter(graph.non_self_dependencies(root)))]

        while stack:
            node, pending = stack[-1]
            advanced = False

            for dep in pending:
                if dep in on_path:
                    cycle = path[path.index(dep) :] + [dep]
                    if not (len(cycle) == 2 and cycle[0] == cycle[1]):
                        cycles.append(cycle)
                    continue
                if dep in visited:
                    continue

                visited.add(dep)
                on_path.add(dep)
                path.append(dep)
                stack.append((dep, iter(graph.non_self_dependencies(dep))))
                advanced = True
                break

            if not advanced:
                stack.pop()
                path.pop()
                on_path.discard(node)

    if cycles:
        logger.debug("Detected %d circular dependency chain(s)", len(cycles))
    return cycles


def has_cycles(graph: DependencyGraph) -> bool:
    return bool(detect_cycles(graph))
