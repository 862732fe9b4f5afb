"""Statement order within a single file.

Unless reordering is allowed, every file must already declare its
statements in dependency order: a statement may not depend on an object
that the *same* file declares further down.  Dependencies satisfied by
other files are left to the global topological sort.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlsmith.errors import InvalidStatementOrderError
from sqlsmith.models.statement import SqlFile, StatementRecord

logger = logging.getLogger(__name__)


def group_by_file(records: Iterable[StatementRecord]) -> dict[str, list[StatementRecord]]:
    """Group records by ``source_file``, keeping first-seen file order and record order."""
    groups: dict[str, list[StatementRecord]] = {}
    for record in records:
        groups.setdefault(record.source_file, []).append(record)
    return groups


def validate_statement_order(file_path: str, statements: list[StatementRecord]) -> None:
    """Check one file's statements, given in declaration order.

    Raises
    ------
    InvalidStatementOrderError
        On the first statement that depends on a later declaration.
    """
    if len(statements) <= 1:
        return

    positions: dict[str, int] = {}
    for index, statement in enumerate(statements):
        positions.setdefault(statement.name, index)

    for index, statement in enumerate(statements):
        for dep_name in statement.non_self_dependency_names:
            dep_index = positions.get(dep_name)
            if dep_index is not None and dep_index > index:
                raise InvalidStatementOrderError(
                    file_path=file_path,
                    statement_name=statement.name,
                    statement_position=index,
                    dependency_name=dep_name,
                    dependency_position=dep_index,
                )


def validate_file_order(sources: Iterable[StatementRecord] | Iterable[SqlFile]) -> None:
    """Validate intra-file statement order for every file.

    Parameters
    ----------
    sources:
        Either statement records (grouped by ``source_file`` here) or
        :class:`SqlFile` objects carrying their statements in file order.

    Raises
    ------
    InvalidStatementOrderError
        If any file declares a dependent before its dependency.
    """
    groups: dict[str, list[StatementRecord]] = {}
    for item in sources:
        if isinstance(item, SqlFile):
            groups.setdefault(item.path, []).extend(item.statements)
        else:
            groups.setdefault(item.source_file, []).append(item)

    for file_path, statements in groups.items():
        validate_statement_order(file_path, statements)

    logger.debug("Statement order valid in %d file(s)", len(groups))
