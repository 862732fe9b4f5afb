"""SQL file discovery and loading."""

from sqlsmith.loader.sql_loader import (
    collect_statements,
    find_sql_files,
    load_sql_directory,
    load_sql_file,
)

__all__ = [
    "collect_statements",
    "find_sql_files",
    "load_sql_directory",
    "load_sql_file",
]
