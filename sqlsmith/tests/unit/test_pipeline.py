"""Unit tests for sqlsmith.merger.pipeline -- the merge orchestrator."""

from __future__ import annotations

import itertools
from unittest.mock import patch

import pytest

from sqlsmith.errors import (
    CircularDependencyError,
    DuplicateNameError,
    ErrorCode,
    InvalidStatementOrderError,
)
from sqlsmith.merger import MergeResult, merge, merge_statements
from sqlsmith.models.statement import Dependency, StatementRecord, StatementType

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _record(
    name: str,
    depends_on: list[str] | None = None,
    source_file: str | None = None,
    statement_type: StatementType = StatementType.TABLE,
) -> StatementRecord:
    return StatementRecord(
        type=statement_type,
        name=name,
        depends_on=[Dependency(name=d) for d in depends_on or []],
        source_file=source_file or f"{name}.sql",
    )


def _rotations(cycle: list[str]) -> list[list[str]]:
    body = cycle[:-1]
    return [body[i:] + body[:i] + [body[i]] for i in range(len(body))]


# ---------------------------------------------------------------------------
# End-to-end scenarios
# ---------------------------------------------------------------------------


class TestMergeScenarios:
    @pytest.mark.parametrize(
        "order",
        list(itertools.permutations(["users", "posts", "comments"])),
    )
    def test_linear_chain_in_any_input_order(self, order):
        deps = {"users": [], "posts": ["users"], "comments": ["posts"]}
        records = [_record(name, deps[name]) for name in order]
        assert merge_statements(records).names == ["users", "posts", "comments"]

    def test_hierarchical_self_reference(self):
        result = merge_statements([_record("employees", ["employees"])])
        assert result.names == ["employees"]
        assert result.dangling_dependencies() == {}

    def test_three_node_cycle(self):
        records = [_record("a", ["c"]), _record("b", ["a"]), _record("c", ["b"])]
        with pytest.raises(CircularDependencyError) as exc_info:
            merge_statements(records)
        err = exc_info.value
        assert err.code == ErrorCode.CIRCULAR_DEPENDENCY
        assert len(err.cycles) == 1
        assert err.cycles[0] in _rotations(["a", "c", "b", "a"])
        assert "a -> c -> b -> a" in err.cycle_descriptions

    def test_duplicate_fails_before_graph_work(self):
        records = [
            _record("widgets", ["gadgets"], source_file="one.sql"),
            _record("gadgets", ["widgets"], source_file="two.sql"),
            _record("widgets", source_file="three.sql"),
        ]
        with patch("sqlsmith.merger.pipeline.build_graph") as mock_build:
            with pytest.raises(DuplicateNameError) as exc_info:
                merge_statements(records)
        mock_build.assert_not_called()
        assert exc_info.value.duplicates == {"widgets": ["one.sql", "three.sql"]}


# ---------------------------------------------------------------------------
# merge_statements behaviour
# ---------------------------------------------------------------------------


class TestMergeStatements:
    def test_empty_input(self):
        result = merge_statements([])
        assert result.statements == []
        assert len(result.graph) == 0

    def test_returns_merge_result_with_graph(self):
        records = [_record("users"), _record("posts", ["users"])]
        result = merge_statements(records)
        assert isinstance(result, MergeResult)
        assert result.graph.has_dependency("posts", "users")

    def test_misordered_file_rejected_by_default(self):
        records = [
            _record("posts", ["users"], source_file="blog.sql"),
            _record("users", source_file="blog.sql"),
        ]
        with pytest.raises(InvalidStatementOrderError) as exc_info:
            merge_statements(records)
        assert exc_info.value.statement_position == 0
        assert exc_info.value.dependency_position == 1

    def test_allow_reorder_sorts_within_file(self):
        records = [
            _record("posts", ["users"], source_file="blog.sql"),
            _record("users", source_file="blog.sql"),
        ]
        assert merge_statements(records, allow_reorder=True).names == ["users", "posts"]

    def test_cycle_reported_even_with_allow_reorder(self):
        records = [_record("a", ["b"]), _record("b", ["a"])]
        with pytest.raises(CircularDependencyError):
            merge_statements(records, allow_reorder=True)

    def test_self_reference_placed_after_other_dependencies(self):
        records = [
            _record("employees", ["employees", "departments"]),
            _record("departments"),
        ]
        assert merge_statements(records).names == ["departments", "employees"]

    def test_dangling_dependencies_are_tolerated(self):
        records = [
            _record("orders", ["customers"]),
            _record("invoices", ["customers", "orders"]),
        ]
        result = merge_statements(records)
        assert result.names == ["orders", "invoices"]
        assert result.dangling_dependencies() == {"customers": ["invoices", "orders"]}

    def test_views_follow_their_tables(self):
        records = [
            _record("active_users", ["users"], statement_type=StatementType.VIEW),
            _record("users", ["user_id_seq"]),
            _record("user_id_seq", statement_type=StatementType.SEQUENCE),
        ]
        assert merge_statements(records).names == ["user_id_seq", "users", "active_users"]

    def test_merge_shorthand_returns_records(self):
        records = [_record("posts", ["users"]), _record("users")]
        ordered = merge(records)
        assert [r.name for r in ordered] == ["users", "posts"]
        assert all(isinstance(r, StatementRecord) for r in ordered)
