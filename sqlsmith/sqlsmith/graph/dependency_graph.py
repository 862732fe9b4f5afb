"""Dependency graph construction using NetworkX.

This module turns a flat list of
:class:`~sqlsmith.models.statement.StatementRecord` objects into a
:class:`DependencyGraph`: one node per object name (declared or merely
referenced) and one directed edge per "depends on" relationship.

Edges point **from** a statement **to** the object it depends on
(``dependent -> dependency``).  The forward view (:attr:`DependencyGraph.edges`)
therefore lists what a node needs, and the reverse view
(:attr:`DependencyGraph.reverse_edges`) lists who needs it.  Both views are
read from the same ``networkx.DiGraph`` (successors and predecessors), so
each is the exact inverse of the other.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import networkx as nx

from sqlsmith.models.statement import StatementRecord

logger = logging.getLogger(__name__)


class DependencyGraph:
    """Directed graph of schema object names.

    Instances are built by :func:`build_graph` and treated as immutable
    afterwards.  Node iteration order is insertion order: records in input
    order, each followed by the names it references.

    Self-references (``employees -> employees``) are stored as ordinary
    edges.  Consumers that must ignore them go through
    :meth:`non_self_dependencies` and :meth:`non_self_dependents`.
    """

    def __init__(self, digraph: nx.DiGraph | None = None) -> None:
        self._graph: nx.DiGraph = digraph if digraph is not None else nx.DiGraph()

    # -- Views --

    @property
    def digraph(self) -> nx.DiGraph:
        """The underlying graph (a read-only view)."""
        return self._graph.copy(as_view=True)

    @property
    def nodes(self) -> list[str]:
        return list(self._graph.nodes)

    @property
    def edges(self) -> dict[str, set[str]]:
        """Mapping of name to the set of names it depends on."""
        return {node: set(self._graph.successors(node)) for node in self._graph.nodes}

    @property
    def reverse_edges(self) -> dict[str, set[str]]:
        """Mapping of name to the set of names that depend on it."""
        return {node: set(self._graph.predecessors(node)) for node in self._graph.nodes}

    def __contains__(self, name: object) -> bool:
        return name in self._graph

    def __iter__(self) -> Iterator[str]:
        return iter(self._graph.nodes)

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DependencyGraph):
            return NotImplemented
        return (
            set(self._graph.nodes) == set(other._graph.nodes)
            and self.edges == other.edges
            and self.reverse_edges == other.reverse_edges
        )

    def __repr__(self) -> str:
        return (
            f"DependencyGraph(nodes={self._graph.number_of_nodes()}, "
            f"edges={self._graph.number_of_edges()})"
        )

    # -- Queries --

    def dependencies(self, name: str) -> list[str]:
        """Names *name* depends on, self-reference included."""
        if name not in self._graph:
            return []
        return list(self._graph.successors(name))

    def dependents(self, name: str) -> list[str]:
        """Names that depend on *name*, self-reference included."""
        if name not in self._graph:
            return []
        return list(self._graph.predecessors(name))

    def non_self_dependencies(self, name: str) -> list[str]:
        """Names *name* depends on, excluding *name* itself."""
        return [dep for dep in self.dependencies(name) if dep != name]

    def non_self_dependents(self, name: str) -> list[str]:
        """Names that depend on *name*, excluding *name* itself."""
        return [dep for dep in self.dependents(name) if dep != name]

    def is_self_referencing(self, name: str) -> bool:
        return self._graph.has_edge(name, name)

    def has_dependency(self, name: str, dependency: str) -> bool:
        return self._graph.has_edge(name, dependency)

    def dangling_names(self, declared: set[str]) -> list[str]:
        """Nodes that are referenced but not in *declared*, in node order."""
        return [node for node in self._graph.nodes if node not in declared]


def build_graph(records: list[StatementRecord]) -> DependencyGraph:
    """Build a :class:`DependencyGraph` from statement records.

    Every record name becomes a node, even when it has no dependencies.
    Every referenced name also becomes a node, including names that no
    record declares (dangling dependencies).  No validation happens here:
    duplicates, self-references and unknown references are all accepted.

    Parameters
    ----------
    records:
        Statement records, typically from every file in one merge.

    Returns
    -------
    DependencyGraph
        A fresh graph; the caller owns it.
    """
    graph = nx.DiGraph()

    for record in records:
        graph.add_node(record.name)
        for dependency in record.depends_on:
            graph.add_node(dependency.name)
            graph.add_edge(record.name, dependency.name)

    logger.debug(
        "Built dependency graph: %d nodes, %d edges from %d statements",
        graph.number_of_nodes(),
        graph.number_of_edges(),
        len(records),
    )
    return DependencyGraph(graph)
