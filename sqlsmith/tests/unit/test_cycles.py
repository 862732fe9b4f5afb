"""Unit tests for sqlsmith.graph.cycles."""

from __future__ import annotations

from sqlsmith.graph.cycles import detect_cycles, has_cycles
from sqlsmith.graph.dependency_graph import build_graph
from sqlsmith.models.statement import Dependency, StatementRecord, StatementType

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _record(name: str, depends_on: list[str] | None = None) -> StatementRecord:
    return StatementRecord(
        type=StatementType.TABLE,
        name=name,
        depends_on=[Dependency(name=d) for d in depends_on or []],
        source_file=f"{name}.sql",
    )


def _graph(deps_by_name: dict[str, list[str]]):
    return build_graph([_record(name, deps) for name, deps in deps_by_name.items()])


# ---------------------------------------------------------------------------
# detect_cycles
# ---------------------------------------------------------------------------


class TestDetectCycles:
    def test_empty_graph(self):
        assert detect_cycles(build_graph([])) == []

    def test_linear_chain_has_no_cycles(self):
        graph = _graph({"users": [], "posts": ["users"], "comments": ["posts", "users"]})
        assert detect_cycles(graph) == []
        assert not has_cycles(graph)

    def test_diamond_has_no_cycles(self):
        graph = _graph({"a": [], "b": ["a"], "c": ["a"], "d": ["b", "c"]})
        assert detect_cycles(graph) == []

    def test_self_reference_is_not_a_cycle(self):
        graph = _graph({"employees": ["employees"]})
        assert detect_cycles(graph) == []
        assert not has_cycles(graph)

    def test_only_self_references_report_no_cycles(self):
        graph = _graph({"a": ["a"], "b": ["b"]})
        assert detect_cycles(graph) == []
        assert not has_cycles(graph)

    def test_self_reference_with_other_dependencies(self):
        graph = _graph({"departments": [], "employees": ["employees", "departments"]})
        assert detect_cycles(graph) == []

    def test_two_node_cycle(self):
        graph = _graph({"a": ["b"], "b": ["a"]})
        assert detect_cycles(graph) == [["a", "b", "a"]]

    def test_three_node_cycle_is_closed_chain(self):
        graph = _graph({"a": ["c"], "b": ["a"], "c": ["b"]})
        cycles = detect_cycles(graph)
        assert cycles == [["a", "c", "b", "a"]]

    def test_cycle_plus_self_reference(self):
        graph = _graph({"a": ["a", "b"], "b": ["a"]})
        cycles = detect_cycles(graph)
        assert cycles == [["a", "b", "a"]]

    def test_disjoint_cycles_both_reported(self):
        graph = _graph({"a": ["b"], "b": ["a"], "x": ["y"], "y": ["x"]})
        cycles = detect_cycles(graph)
        assert len(cycles) == 2
        assert {frozenset(c) for c in cycles} == {frozenset({"a", "b"}), frozenset({"x", "y"})}

    def test_every_reported_cycle_is_closed_and_real(self):
        graph = _graph({"a": ["b"], "b": ["c"], "c": ["a", "d"], "d": ["b"]})
        cycles = detect_cycles(graph)
        assert cycles
        for cycle in cycles:
            assert cycle[0] == cycle[-1]
            assert len(set(cycle)) >= 2
            for src, dst in zip(cycle, cycle[1:]):
                assert graph.has_dependency(src, dst)

    def test_dangling_reference_does_not_hide_cycle(self):
        graph = _graph({"orders": ["customers"], "a": ["b"], "b": ["a"]})
        cycles = detect_cycles(graph)
        assert cycles == [["a", "b", "a"]]

    def test_long_chain_does_not_recurse(self):
        size = 5000
        deps_by_name = {f"t{i}": ([f"t{i + 1}"] if i < size - 1 else []) for i in range(size)}
        graph = _graph(deps_by_name)
        assert detect_cycles(graph) == []

    def test_long_cycle_is_found(self):
        size = 3000
        deps_by_name = {f"t{i}": [f"t{(i + 1) % size}"] for i in range(size)}
        cycles = detect_cycles(_graph(deps_by_name))
        assert len(cycles) == 1
        assert len(cycles[0]) == size + 1
