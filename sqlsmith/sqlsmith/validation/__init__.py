"""Input validation: global name uniqueness and intra-file statement order."""

from sqlsmith.validation.file_order import (
    group_by_file,
    validate_file_order,
    validate_statement_order,
)
from sqlsmith.validation.unique_names import find_duplicate_names, validate_unique_names

__all__ = [
    "find_duplicate_names",
    "group_by_file",
    "validate_file_order",
    "validate_statement_order",
    "validate_unique_names",
]
