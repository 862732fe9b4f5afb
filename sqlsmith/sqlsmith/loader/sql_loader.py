"""Load SQL schema files from disk into :class:`SqlFile` objects.

Only the top level of the input directory is scanned; files are processed
in sorted path order so repeated runs see the same input order.

Typical usage::

    files = load_sql_directory(Path("schema/"), Dialect.POSTGRESQL)
    records = collect_statements(files)
"""

from __future__ import annotations

import logging
from pathlib import Path

from sqlsmith.errors import FileSystemError, SqlParseError
from sqlsmith.models.dialect import Dialect
from sqlsmith.models.statement import SqlFile, StatementRecord
from sqlsmith.parser.ddl_parser import parse_sql
from sqlsmith.parser.processors import extract_statements

logger = logging.getLogger(__name__)

_SQL_SUFFIX = ".sql"


def find_sql_files(directory: Path) -> list[Path]:
    """Return the ``.sql`` files directly inside *directory*, sorted.

    The suffix match is case-insensitive.  Subdirectories are not searched.

    Raises
    ------
    FileSystemError
        If *directory* does not exist or is not a directory.
    """
    if not directory.exists():
        raise FileSystemError.directory_not_found(str(directory))
    if not directory.is_dir():
        raise FileSystemError.not_a_directory(str(directory))

    return sorted(path for path in directory.iterdir() if path.is_file() and path.suffix.lower() == _SQL_SUFFIX)


def load_sql_file(path: Path, dialect: Dialect = Dialect.POSTGRESQL) -> SqlFile:
    """Read, parse and extract the statements of a single SQL file.

    An empty (or whitespace-only) file yields a :class:`SqlFile` with no
    statements.

    Raises
    ------
    FileSystemError
        If the file is missing or cannot be read as UTF-8 text.
    SqlParseError
        If the file contains SQL the parser rejects; the error names the file.
    """
    if not path.is_file():
        raise FileSystemError(f"File not found: {path}", context={"path": str(path)})

    source_file = str(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileSystemError.unreadable_file(source_file, str(exc)) from exc

    if not content.strip():
        logger.debug("Skipping empty file %s", path)
        return SqlFile(path=source_file, content=content, statements=[], dialect=dialect)

    try:
        parsed = parse_sql(content, dialect)
    except SqlParseError as exc:
        raise exc.with_file(source_file) from exc.__cause__

    statements = extract_statements(parsed, source_file)
    logger.debug("%s: %d statement(s) of %d parsed", path.name, len(statements), len(parsed))
    return SqlFile(path=source_file, content=content, statements=statements, dialect=dialect)


def load_sql_directory(directory: Path, dialect: Dialect = Dialect.POSTGRESQL) -> list[SqlFile]:
    """Load every SQL file directly inside *directory*.

    Parameters
    ----------
    directory:
        Directory holding the schema fragments.
    dialect:
        Dialect used to parse every file.

    Returns
    -------
    list[SqlFile]
        One entry per file, in sorted path order.

    Raises
    ------
    FileSystemError
        If *directory* is missing, not a directory, or contains no ``.sql``
        files.
    SqlParseError
        If any file fails to parse.
    """
    paths = find_sql_files(directory)
    if not paths:
        raise FileSystemError.no_sql_files(str(directory))

    logger.info("Parsing %d SQL file(s) from '%s' (%s)", len(paths), directory, dialect.value)
    return [load_sql_file(path, dialect) for path in paths]


def collect_statements(files: list[SqlFile]) -> list[StatementRecord]:
    """Flatten the statements of *files*, preserving file and declaration order."""
    return [statement for sql_file in files for statement in sql_file.statements]
