"""Supported SQL dialects."""

from __future__ import annotations

from enum import Enum


class Dialect(str, Enum):
    """SQL dialects accepted on the command line and in settings."""

    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLITE = "sqlite"
    BIGQUERY = "bigquery"

    @property
    def sqlglot_name(self) -> str:
        """Dialect name understood by the sqlglot parser."""
        return _SQLGLOT_NAMES[self]


_SQLGLOT_NAMES: dict[Dialect, str] = {
    Dialect.POSTGRESQL: "postgres",
    Dialect.MYSQL: "mysql",
    Dialect.SQLITE: "sqlite",
    Dialect.BIGQUERY: "bigquery",
}
