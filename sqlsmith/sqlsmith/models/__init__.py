"""Domain models for SQLsmith."""

from sqlsmith.models.dialect import Dialect
from sqlsmith.models.statement import (
    Dependency,
    SqlFile,
    StatementRecord,
    StatementType,
)

__all__ = [
    "Dependency",
    "Dialect",
    "SqlFile",
    "StatementRecord",
    "StatementType",
]
