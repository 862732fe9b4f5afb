"""SQLsmith CLI application -- Typer-based developer interface.

Provides commands to merge a directory of SQL schema files into one
dependency-ordered script, to inspect the dependency graph, and to
validate a directory without merging.  Merged SQL and ``--json`` documents
go to *stdout*; human-readable output goes to *stderr* via Rich so that
pipelines can compose cleanly.

Exit codes: 0 on success, 1 when the input is rejected (duplicate names,
misordered files, cycles, parse failures, missing files), 3 on unexpected
errors.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from sqlsmith import __version__
from sqlsmith.config import LogLevel, Settings, load_settings
from sqlsmith.errors import CircularDependencyError, SqlsmithError
from sqlsmith.models import Dialect, SqlFile, StatementRecord
from sqlsmith_cli.display import (
    display_dangling_dependencies,
    display_dependency_graph,
    display_error,
    display_execution_order,
    display_file_statements,
    display_statement_summary,
)
from sqlsmith_cli.logging_setup import configure_logging

# ---------------------------------------------------------------------------
# App & global state
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="sqlsmith",
    help="SQLsmith - merge SQL schema files with automatic dependency ordering",
    no_args_is_help=True,
)
console = Console(stderr=True)

# Mutable global options populated by the Typer callback.
_json_output: bool = False


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"sqlsmith {__version__}")
        raise typer.Exit(code=0)


# ---------------------------------------------------------------------------
# Callback -- global options
# ---------------------------------------------------------------------------


@app.callback()
def _global_options(
    json_mode: bool = typer.Option(
        False,
        "--json/--no-json",
        help="Emit structured JSON to stdout instead of human-readable output.",
    ),
    log_level: LogLevel | None = typer.Option(
        None,
        "--log-level",
        case_sensitive=False,
        help="Log level (error | warn | warning | info | debug).",
    ),
    structured_logs: bool = typer.Option(
        False,
        "--structured-logs",
        help="Emit log records as single-line JSON on stderr.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Global options applied to every command."""
    global _json_output  # noqa: PLW0603
    _json_output = json_mode

    try:
        settings = load_settings()
    except SqlsmithError as exc:
        raise _fail(exc) from exc

    level = log_level or settings.log_level
    configure_logging(level.level, structured=structured_logs or settings.structured_logging)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _settings(dialect: Dialect | None, allow_reorder: bool) -> Settings:
    """Load settings, letting explicit CLI flags win over the environment."""
    overrides: dict[str, Any] = {}
    if dialect is not None:
        overrides["dialect"] = dialect
    if allow_reorder:
        overrides["allow_reorder"] = True
    return load_settings(**overrides)


def _load_files(input_dir: Path, dialect: Dialect) -> list[SqlFile]:
    from sqlsmith.loader import load_sql_directory

    return load_sql_directory(input_dir, dialect)


def _statement_json(statement: StatementRecord) -> dict[str, Any]:
    return {
        "name": statement.name,
        "type": statement.type.value,
        "file": statement.source_file,
        "line": statement.line_number,
        "depends_on": statement.dependency_names,
    }


def _fail(exc: Exception) -> typer.Exit:
    """Report *exc* and return the matching ``typer.Exit`` to raise."""
    if isinstance(exc, SqlsmithError):
        if _json_output:
            error = {
                "code": exc.code.value,
                "message": str(exc),
                "context": exc.context,
            }
            if isinstance(exc, CircularDependencyError):
                error["cycles"] = exc.cycles
            sys.stdout.write(json.dumps({"error": error}, indent=2, default=str) + "\n")
        else:
            display_error(console, exc)
        return typer.Exit(code=1)

    console.print(f"[red]Unexpected error: {exc}[/red]")
    return typer.Exit(code=3)


_INPUT_ARGUMENT = typer.Argument(
    ...,
    help="Directory containing the SQL files to process.",
    exists=True,
    file_okay=False,
    resolve_path=True,
)
_DIALECT_OPTION = typer.Option(
    None,
    "--dialect",
    "-d",
    case_sensitive=False,
    help="SQL dialect (postgresql | mysql | sqlite | bigquery).",
)
_ALLOW_REORDER_OPTION = typer.Option(
    False,
    "--allow-reorder",
    help="Allow statements to be reordered within a file instead of failing on misordered files.",
)


# ---------------------------------------------------------------------------
# merge
# ---------------------------------------------------------------------------


@app.command()
def merge(
    input_dir: Path = _INPUT_ARGUMENT,
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write merged SQL to this file instead of stdout.",
    ),
    dialect: Dialect | None = _DIALECT_OPTION,
    allow_reorder: bool = _ALLOW_REORDER_OPTION,
    no_comments: bool = typer.Option(
        False,
        "--no-comments",
        help="Omit the per-file comment banners.",
    ),
    no_header: bool = typer.Option(
        False,
        "--no-header",
        help="Omit the generation summary at the top of the output.",
    ),
    no_separate: bool = typer.Option(
        False,
        "--no-separate",
        help="Do not put blank lines between file blocks.",
    ),
) -> None:
    """Merge every SQL file in a directory into one dependency-ordered script."""
    from sqlsmith.loader import collect_statements
    from sqlsmith.merger import merge_statements
    from sqlsmith.output import render_merged_sql, write_output

    try:
        settings = _settings(dialect, allow_reorder)
        options = settings.merge_options().model_copy(
            update={
                "add_comments": settings.add_comments and not no_comments,
                "include_header": settings.include_header and not no_header,
                "separate_statements": settings.separate_statements and not no_separate,
            }
        )
        files = _load_files(input_dir, settings.dialect)
        records = collect_statements(files)
        result = merge_statements(records, allow_reorder=settings.allow_reorder)
        merged_sql = render_merged_sql(result.statements, options)

        if output is not None:
            write_output(merged_sql, output)

        if _json_output:
            document = {
                "files": len(files),
                "order": [_statement_json(s) for s in result.statements],
                "dangling": result.dangling_dependencies(),
                "output": str(output) if output is not None else None,
                "sql": merged_sql if output is None else None,
            }
            sys.stdout.write(json.dumps(document, indent=2) + "\n")
        else:
            if output is None:
                sys.stdout.write(merged_sql)
            display_statement_summary(console, files)
            display_dangling_dependencies(console, result.dangling_dependencies())
            destination = str(output) if output is not None else "stdout"
            console.print(
                f"[green]✔[/green] Merged [bold]{len(result.statements)}[/bold] statement(s) "
                f"to [bold]{destination}[/bold]"
            )

    except typer.Exit:
        raise
    except Exception as exc:
        raise _fail(exc) from exc


# ---------------------------------------------------------------------------
# info
# ---------------------------------------------------------------------------


@app.command()
def info(
    input_dir: Path = _INPUT_ARGUMENT,
    dialect: Dialect | None = _DIALECT_OPTION,
    allow_reorder: bool = _ALLOW_REORDER_OPTION,
) -> None:
    """Analyze dependencies and show the execution order without merging."""
    from sqlsmith.graph import build_graph
    from sqlsmith.loader import collect_statements
    from sqlsmith.merger import merge_statements

    try:
        settings = _settings(dialect, allow_reorder)
        files = _load_files(input_dir, settings.dialect)
        records = collect_statements(files)

        try:
            result = merge_statements(records, allow_reorder=settings.allow_reorder)
        except CircularDependencyError as exc:
            if not _json_output:
                display_dependency_graph(console, build_graph(records), records, exc.cycles)
            raise

        if _json_output:
            document = {
                "files": len(files),
                "statements": [_statement_json(s) for s in records],
                "order": result.names,
                "dangling": result.dangling_dependencies(),
            }
            sys.stdout.write(json.dumps(document, indent=2) + "\n")
            return

        display_statement_summary(console, files)
        display_dependency_graph(console, result.graph, records)
        display_dangling_dependencies(console, result.dangling_dependencies())
        display_execution_order(console, result.statements)

    except typer.Exit:
        raise
    except Exception as exc:
        raise _fail(exc) from exc


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@app.command()
def validate(
    input_dir: Path = _INPUT_ARGUMENT,
    dialect: Dialect | None = _DIALECT_OPTION,
    allow_reorder: bool = _ALLOW_REORDER_OPTION,
) -> None:
    """Validate SQL files and check for duplicate names and circular dependencies."""
    from sqlsmith.loader import collect_statements
    from sqlsmith.merger import merge_statements

    try:
        settings = _settings(dialect, allow_reorder)
        files = _load_files(input_dir, settings.dialect)
        records = collect_statements(files)
        result = merge_statements(records, allow_reorder=settings.allow_reorder)

        if _json_output:
            document = {
                "valid": True,
                "files": [
                    {
                        "path": f.path,
                        "statements": [f"{s.type.value}:{s.name}" for s in f.statements],
                    }
                    for f in files
                ],
                "dangling": result.dangling_dependencies(),
            }
            sys.stdout.write(json.dumps(document, indent=2) + "\n")
            return

        display_file_statements(console, files)
        display_dangling_dependencies(console, result.dangling_dependencies())
        console.print(f"\nTotal: [bold]{len(files)}[/bold] file(s), [bold]{len(records)}[/bold] statement(s)")
        console.print("[green]✔[/green] No circular dependencies detected")
        console.print("[green]✔[/green] Ready for merging")

    except typer.Exit:
        raise
    except Exception as exc:
        raise _fail(exc) from exc
