"""SQL text to parsed statements, backed by SQLGlot.

This is the only module that calls SQLGlot's tokenizer and parser.  It
splits a file into statements on top-level semicolons (so semicolons inside
strings, comments or dollar-quoted bodies are left alone), keeps each
statement's original text and starting line, and parses each one into a
SQLGlot expression for the processors to inspect.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import sqlglot
from sqlglot import exp
from sqlglot.errors import ErrorLevel, ParseError, SqlglotError
from sqlglot.tokens import TokenType

from sqlsmith.errors import ErrorCode, SqlParseError
from sqlsmith.models.dialect import Dialect

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StatementChunk:
    """Raw text of one statement, without its terminating semicolon."""

    text: str
    line_number: int
    text_line: int = 1


@dataclass(frozen=True)
class ParsedStatement:
    """One statement's original text together with its parsed expression."""

    text: str
    line_number: int
    expression: exp.Expression


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _line_at(sql: str, offset: int) -> int:
    return sql.count("\n", 0, offset) + 1


def split_statements(sql: str, dialect: Dialect = Dialect.POSTGRESQL) -> list[StatementChunk]:
    """Split *sql* into statement chunks on top-level semicolons.

    Comments preceding a statement stay in its chunk; a chunk ends at its
    last token, so trailing comments before the semicolon or at end of file
    are not carried.  Chunks containing no tokens (blank, or comments only)
    are dropped.

    Raises
    ------
    SqlParseError
        If the text cannot be tokenized (e.g. an unterminated string).
    """
    try:
        tokens = sqlglot.tokenize(sql, read=dialect.sqlglot_name)
    except SqlglotError as exc:
        raise SqlParseError(str(exc), code=ErrorCode.INVALID_SQL_SYNTAX) from exc

    chunks: list[StatementChunk] = []
    chunk_start = 0
    first_token_start: int | None = None
    last_token_end = 0

    for token in tokens:
        if token.token_type == TokenType.SEMICOLON:
            if first_token_start is not None:
                chunks.append(
                    StatementChunk(
                        text=sql[chunk_start : last_token_end + 1],
                        line_number=_line_at(sql, first_token_start),
                        text_line=_line_at(sql, chunk_start),
                    )
                )
            chunk_start = token.end + 1
            first_token_start = None
            continue
        if first_token_start is None:
            first_token_start = token.start
        last_token_end = token.end

    if first_token_start is not None:
        chunks.append(
            StatementChunk(
                text=sql[chunk_start : last_token_end + 1],
                line_number=_line_at(sql, first_token_start),
                text_line=_line_at(sql, chunk_start),
            )
        )

    return chunks


def parse_statement(chunk: StatementChunk, dialect: Dialect = Dialect.POSTGRESQL) -> ParsedStatement:
    """Parse a single chunk produced by :func:`split_statements`.

    Raises
    ------
    SqlParseError
        If SQLGlot rejects the statement.  The reported line is absolute
        within the original file.
    """
    try:
        expression = sqlglot.parse_one(
            chunk.text,
            read=dialect.sqlglot_name,
            error_level=ErrorLevel.RAISE,
        )
    except ParseError as exc:
        line_number = chunk.line_number
        if exc.errors:
            relative = exc.errors[0].get("line")
            if isinstance(relative, int) and relative > 0:
                line_number = max(chunk.text_line + relative - 1, chunk.line_number)
        raise SqlParseError(
            str(exc),
            line_number=line_number,
            code=ErrorCode.INVALID_SQL_SYNTAX,
        ) from exc
    except SqlglotError as exc:
        raise SqlParseError(str(exc), line_number=chunk.line_number) from exc

    return ParsedStatement(
        text=chunk.text,
        line_number=chunk.line_number,
        expression=expression,
    )


def parse_sql(sql: str, dialect: Dialect = Dialect.POSTGRESQL) -> list[ParsedStatement]:
    """Split and parse every statement in *sql*.

    Parameters
    ----------
    sql:
        Text of a whole SQL file; may contain any number of statements.
    dialect:
        Dialect used by the tokenizer and parser.

    Returns
    -------
    list[ParsedStatement]
        Statements in file order.

    Raises
    ------
    SqlParseError
        If any statement fails to tokenize or parse.
    """
    statements = [parse_statement(chunk, dialect) for chunk in split_statements(sql, dialect)]
    logger.debug("Parsed %d statement(s) (%s)", len(statements), dialect.value)
    return statements
