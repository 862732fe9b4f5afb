"""Topological ordering of statement records (Kahn's algorithm)."""

from __future__ import annotations

import logging
from collections import deque

from sqlsmith.errors import TopologicalSortError
from sqlsmith.graph.dependency_graph import DependencyGraph
from sqlsmith.models.statement import StatementRecord

logger = logging.getLogger(__name__)


def topological_order(graph: DependencyGraph) -> list[str]:
    """Return every node name with dependencies before dependents.

    Uses Kahn's algorithm with a FIFO queue.  A node's in-degree is the
    number of distinct *non-self* dependencies it has, so a table that only
    references itself is a root.  The queue is seeded in graph iteration
    order, which makes the result deterministic for a given graph.

    Raises
    ------
    TopologicalSortError
        If some nodes could not be placed.  Cycle detection should have
        rejected such a graph already, so this indicates a bug.
    """
    in_degree: dict[str, int] = {node: len(graph.non_self_dependencies(node)) for node in graph}
    queue: deque[str] = deque(node for node, degree in in_degree.items() if degree == 0)
    ordered: list[str] = []

    while queue:
        current = queue.popleft()
        ordered.append(current)
        for dependent in graph.non_self_dependents(current):
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    if len(ordered) != len(graph):
        placed = set(ordered)
        unsorted = [node for node in graph if node not in placed]
        raise TopologicalSortError(len(ordered), len(graph), unsorted)

    return ordered


def topological_sort(records: list[StatementRecord], graph: DependencyGraph) -> list[StatementRecord]:
    """Return *records* reordered so that every dependency precedes its dependents.

    Names in the graph without a matching record (dangling references) are
    skipped when mapping the order back to records.  Repeated declarations
    of one name within a file share that name's slot, in input order.

    Parameters
    ----------
    records:
        The records the graph was built from.
    graph:
        A graph built by :func:`~sqlsmith.graph.dependency_graph.build_graph`.

    Returns
    -------
    list[StatementRecord]
        A permutation of *records*.
    """
    by_name: dict[str, list[StatementRecord]] = {}
    for record in records:
        by_name.setdefault(record.name, []).append(record)

    ordered = [record for name in topological_order(graph) for record in by_name.get(name, [])]

    logger.debug(
        "Topological order: %s",
        " -> ".join(f"{r.type.value}:{r.name}" for r in ordered),
    )
    return ordered
