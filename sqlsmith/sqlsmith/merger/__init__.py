"""Merge orchestration."""

from sqlsmith.merger.pipeline import MergeResult, merge, merge_statements

__all__ = [
    "MergeResult",
    "merge",
    "merge_statements",
]
