"""Error taxonomy for SQLsmith.

Every failure the engine reports derives from :class:`SqlsmithError` and
carries an :class:`ErrorCode` plus the structured fields a caller needs to
render a diagnostic (names, files, positions, cycle chains).  Messages are
for logs; callers should prefer the attributes.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Machine-readable error classification."""

    # File system
    DIRECTORY_NOT_FOUND = "DIRECTORY_NOT_FOUND"
    NOT_A_DIRECTORY = "NOT_A_DIRECTORY"
    NO_SQL_FILES = "NO_SQL_FILES"
    FILE_READ_ERROR = "FILE_READ_ERROR"
    INVALID_OUTPUT_PATH = "INVALID_OUTPUT_PATH"

    # Parsing
    INVALID_SQL_SYNTAX = "INVALID_SQL_SYNTAX"
    PARSING_FAILED = "PARSING_FAILED"

    # Dependencies
    CIRCULAR_DEPENDENCY = "CIRCULAR_DEPENDENCY"
    DUPLICATE_STATEMENT_NAMES = "DUPLICATE_STATEMENT_NAMES"
    INVALID_STATEMENT_ORDER = "INVALID_STATEMENT_ORDER"

    # Configuration
    INVALID_OPTIONS = "INVALID_OPTIONS"

    # Internal
    INTERNAL_ERROR = "INTERNAL_ERROR"


class SqlsmithError(Exception):
    """Base class for every error raised by SQLsmith."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        if code is not None:
            self.code = code
        self.context: dict[str, Any] = context or {}
        super().__init__(message)

    def detailed_message(self) -> str:
        """Return ``[CODE] message (key: value, ...)`` plus any chained cause."""
        message = f"[{self.code.value}] {self}"
        if self.context:
            rendered = ", ".join(f"{key}: {value}" for key, value in self.context.items())
            message += f" ({rendered})"
        if self.__cause__ is not None:
            message += f"\nCaused by: {self.__cause__}"
        return message


# ---------------------------------------------------------------------------
# Dependency errors
# ---------------------------------------------------------------------------


def format_cycle(cycle: list[str]) -> str:
    """Render a closed cycle as ``a -> b -> a``."""
    return " -> ".join(cycle)


class DuplicateNameError(SqlsmithError):
    """Raised when the same object name is declared in more than one file.

    Attributes
    ----------
    duplicates:
        Mapping of duplicated name to the sorted, deduplicated list of
        source files declaring it.
    """

    code = ErrorCode.DUPLICATE_STATEMENT_NAMES

    def __init__(self, duplicates: dict[str, list[str]]) -> None:
        self.duplicates = {name: sorted(set(files)) for name, files in duplicates.items()}
        details = "; ".join(f"'{name}' in {', '.join(files)}" for name, files in self.duplicates.items())
        super().__init__(
            f"Duplicate statement names found: {details}",
            context={"names": ", ".join(self.duplicates)},
        )


class InvalidStatementOrderError(SqlsmithError):
    """Raised when a file declares a statement before one of its dependencies."""

    code = ErrorCode.INVALID_STATEMENT_ORDER

    def __init__(
        self,
        file_path: str,
        statement_name: str,
        statement_position: int,
        dependency_name: str,
        dependency_position: int,
    ) -> None:
        self.file_path = file_path
        self.statement_name = statement_name
        self.statement_position = statement_position
        self.dependency_name = dependency_name
        self.dependency_position = dependency_position
        super().__init__(
            f"Invalid statement order in file '{file_path}': statement '{statement_name}' "
            f"at position {statement_position} depends on '{dependency_name}' which appears "
            f"later in the file at position {dependency_position}",
            context={"file": file_path},
        )


class CircularDependencyError(SqlsmithError):
    """Raised when the dependency graph contains one or more genuine cycles.

    Attributes
    ----------
    cycles:
        Each cycle as a closed chain of names, e.g. ``["a", "c", "b", "a"]``.
    """

    code = ErrorCode.CIRCULAR_DEPENDENCY

    def __init__(self, cycles: list[list[str]]) -> None:
        self.cycles = [list(cycle) for cycle in cycles]
        formatted = "; ".join(format_cycle(c) for c in self.cycles)
        super().__init__(f"Circular dependencies detected: {formatted}")

    @property
    def cycle_descriptions(self) -> list[str]:
        return [format_cycle(c) for c in self.cycles]


class TopologicalSortError(SqlsmithError):
    """Raised when the sorter cannot place every node.

    This signals an internal inconsistency: cycle detection reported no
    cycles, yet Kahn's algorithm stalled.
    """

    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, sorted_count: int, node_count: int, unsorted: list[str]) -> None:
        self.sorted_count = sorted_count
        self.node_count = node_count
        self.unsorted = unsorted
        super().__init__(
            f"Topological sort failed: placed {sorted_count} of {node_count} nodes "
            f"(unresolved: {', '.join(unsorted)})"
        )


# ---------------------------------------------------------------------------
# Parsing, file-system and configuration errors
# ---------------------------------------------------------------------------


class SqlParseError(SqlsmithError):
    """Raised when SQL text cannot be tokenized or parsed."""

    code = ErrorCode.PARSING_FAILED

    def __init__(
        self,
        reason: str,
        *,
        file_path: str | None = None,
        line_number: int | None = None,
        code: ErrorCode | None = None,
    ) -> None:
        self.reason = reason
        self.file_path = file_path
        self.line_number = line_number
        location = ""
        if file_path:
            location = f" in file {file_path}"
            if line_number:
                location += f" at line {line_number}"
        elif line_number:
            location = f" at line {line_number}"
        super().__init__(f"Failed to parse SQL{location}: {reason}", code=code)

    def with_file(self, file_path: str) -> SqlParseError:
        """Return a copy of this error located in *file_path*."""
        return SqlParseError(
            self.reason,
            file_path=file_path,
            line_number=self.line_number,
            code=self.code,
        )


class FileSystemError(SqlsmithError):
    """Raised for missing inputs or unusable output destinations."""

    @classmethod
    def directory_not_found(cls, path: str) -> FileSystemError:
        return cls(
            f"Directory not found: {path}",
            code=ErrorCode.DIRECTORY_NOT_FOUND,
            context={"path": path},
        )

    @classmethod
    def not_a_directory(cls, path: str) -> FileSystemError:
        return cls(
            f"Input path is not a directory: {path}",
            code=ErrorCode.NOT_A_DIRECTORY,
            context={"path": path},
        )

    @classmethod
    def no_sql_files(cls, directory: str) -> FileSystemError:
        return cls(
            f"No SQL files found in directory: {directory}",
            code=ErrorCode.NO_SQL_FILES,
            context={"directory": directory},
        )

    @classmethod
    def unreadable_file(cls, path: str, reason: str) -> FileSystemError:
        return cls(
            f"Failed to read SQL file '{path}': {reason}",
            code=ErrorCode.FILE_READ_ERROR,
            context={"path": path},
        )

    @classmethod
    def invalid_output_path(cls, path: str, reason: str) -> FileSystemError:
        return cls(
            f"Invalid output path {path}: {reason}",
            code=ErrorCode.INVALID_OUTPUT_PATH,
            context={"path": path},
        )


class ConfigurationError(SqlsmithError):
    """Raised for invalid option values."""

    code = ErrorCode.INVALID_OPTIONS

    def __init__(self, option_name: str, value: object) -> None:
        self.option_name = option_name
        self.value = value
        super().__init__(
            f"Invalid option '{option_name}': {value!r}",
            context={"option": option_name},
        )
