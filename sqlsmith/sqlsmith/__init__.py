"""SQLsmith: merge SQL schema fragments into one dependency-ordered script."""

from sqlsmith.errors import (
    CircularDependencyError,
    ConfigurationError,
    DuplicateNameError,
    ErrorCode,
    FileSystemError,
    InvalidStatementOrderError,
    SqlParseError,
    SqlsmithError,
    TopologicalSortError,
)
from sqlsmith.graph import DependencyGraph, build_graph, detect_cycles, topological_sort
from sqlsmith.merger import MergeResult, merge, merge_statements
from sqlsmith.models import Dependency, Dialect, SqlFile, StatementRecord, StatementType
from sqlsmith.validation import validate_file_order, validate_unique_names

__version__ = "0.1.0"

__all__ = [
    "CircularDependencyError",
    "ConfigurationError",
    "Dependency",
    "DependencyGraph",
    "Dialect",
    "DuplicateNameError",
    "ErrorCode",
    "FileSystemError",
    "InvalidStatementOrderError",
    "MergeResult",
    "SqlFile",
    "SqlParseError",
    "SqlsmithError",
    "StatementRecord",
    "StatementType",
    "TopologicalSortError",
    "build_graph",
    "detect_cycles",
    "merge",
    "merge_statements",
    "topological_sort",
    "validate_file_order",
    "validate_unique_names",
]
