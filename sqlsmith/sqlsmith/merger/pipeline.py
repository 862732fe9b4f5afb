"""Merge orchestration: validate, build, check and sort in one pass.

The pipeline is linear and all-or-nothing.  Each stage either hands its
output to the next or raises, in which case no ordering is produced:

1. :func:`~sqlsmith.validation.validate_unique_names`
2. :func:`~sqlsmith.graph.build_graph`
3. :func:`~sqlsmith.validation.validate_file_order` (skipped when
   ``allow_reorder`` is set)
4. :func:`~sqlsmith.graph.detect_cycles`
5. :func:`~sqlsmith.graph.topological_sort`
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlsmith.errors import CircularDependencyError
from sqlsmith.graph.cycles import detect_cycles
from sqlsmith.graph.dependency_graph import DependencyGraph, build_graph
from sqlsmith.graph.sorter import topological_sort
from sqlsmith.models.statement import StatementRecord
from sqlsmith.validation.file_order import validate_file_order
from sqlsmith.validation.unique_names import validate_unique_names

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeResult:
    """Outcome of a successful merge.

    Attributes
    ----------
    statements:
        Records in dependency-safe order.
    graph:
        The graph the order was derived from.
    """

    statements: list[StatementRecord]
    graph: DependencyGraph

    @property
    def names(self) -> list[str]:
        return [s.name for s in self.statements]

    def dangling_dependencies(self) -> dict[str, list[str]]:
        """Referenced names with no declaring statement, mapped to their referrers.

        These are tolerated (the object may live outside the merged
        directory) and never fail a merge.
        """
        declared = {s.name for s in self.statements}
        return {
            name: sorted(self.graph.non_self_dependents(name))
            for name in self.graph.dangling_names(declared)
        }


def merge_statements(
    records: list[StatementRecord],
    *,
    allow_reorder: bool = False,
) -> MergeResult:
    """Run the full validation and ordering pipeline over *records*.

    Parameters
    ----------
    records:
        Every statement taking part in the merge.
    allow_reorder:
        Skip the intra-file order check, letting the sort move statements
        within a file.

    Returns
    -------
    MergeResult
        Ordered records and the dependency graph.

    Raises
    ------
    DuplicateNameError
        If a name is declared by more than one file.  Raised before any
        graph work.
    InvalidStatementOrderError
        If a file declares a dependent before its dependency and
        *allow_reorder* is false.
    CircularDependencyError
        If the graph contains genuine cycles.
    TopologicalSortError
        If the sorter stalls despite no cycles being found.
    """
    validate_unique_names(records)

    graph = build_graph(records)

    if not allow_reorder:
        validate_file_order(records)

    cycles = detect_cycles(graph)
    if cycles:
        raise CircularDependencyError(cycles)

    ordered = topological_sort(records, graph)
    logger.info("Resolved order for %d statement(s)", len(ordered))
    return MergeResult(statements=ordered, graph=graph)


def merge(
    records: list[StatementRecord],
    *,
    allow_reorder: bool = False,
) -> list[StatementRecord]:
    """Return *records* in dependency-safe order.

    Shorthand for ``merge_statements(records, allow_reorder=...).statements``.
    """
    return merge_statements(records, allow_reorder=allow_reorder).statements
