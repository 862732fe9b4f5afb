"""Dependency graph construction, cycle detection and topological ordering."""

from sqlsmith.graph.cycles import detect_cycles, has_cycles
from sqlsmith.graph.dependency_graph import DependencyGraph, build_graph
from sqlsmith.graph.sorter import topological_order, topological_sort

__all__ = [
    "DependencyGraph",
    "build_graph",
    "detect_cycles",
    "has_cycles",
    "topological_order",
    "topological_sort",
]
