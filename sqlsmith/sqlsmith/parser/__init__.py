"""SQL parsing and statement extraction."""

from sqlsmith.parser.ddl_parser import (
    ParsedStatement,
    StatementChunk,
    parse_sql,
    parse_statement,
    split_statements,
)
from sqlsmith.parser.processors import (
    classify_statement,
    extract_statement,
    extract_statements,
    supported_types,
)

__all__ = [
    "ParsedStatement",
    "StatementChunk",
    "classify_statement",
    "extract_statement",
    "extract_statements",
    "parse_sql",
    "parse_statement",
    "split_statements",
    "supported_types",
]
