"""Rich output formatting for the SQLsmith CLI.

All functions write to a :class:`rich.console.Console` instance (typically
bound to *stderr*) so that merged SQL and JSON on *stdout* are never
polluted with human-readable decoration.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

if TYPE_CHECKING:
    from rich.console import Console

    from sqlsmith.errors import SqlsmithError
    from sqlsmith.graph import DependencyGraph
    from sqlsmith.models import SqlFile, StatementRecord


_TYPE_COLOURS: dict[str, str] = {
    "table": "cyan",
    "view": "magenta",
    "sequence": "yellow",
}


def _coloured_type(type_value: str) -> str:
    colour = _TYPE_COLOURS.get(type_value, "white")
    return f"[{colour}]{type_value.upper()}[/{colour}]"


# ---------------------------------------------------------------------------
# Statement summary
# ---------------------------------------------------------------------------


def display_statement_summary(console: Console, files: list[SqlFile]) -> None:
    """Print how many files were processed and statements found per type."""
    statements = [s for f in files for s in f.statements]
    console.print(f"[green]✔[/green] Processed [bold]{len(files)}[/bold] SQL file(s)")
    console.print(f"Found [bold]{len(statements)}[/bold] statement(s):")
    counts = Counter(s.type.value for s in statements)
    for type_value, count in counts.items():
        plural = "s" if count > 1 else ""
        console.print(f"  - {count} {_coloured_type(type_value)} statement{plural}")


# ---------------------------------------------------------------------------
# Dependency graph
# ---------------------------------------------------------------------------


def display_dependency_graph(
    console: Console,
    graph: DependencyGraph,
    statements: list[StatementRecord],
    cycles: list[list[str]] | None = None,
) -> None:
    """Render every node with what it depends on and what references it.

    Parameters
    ----------
    console:
        Rich console to write to.
    graph:
        The dependency graph.
    statements:
        Records used to label nodes with their type; nodes without a record
        are shown as external.
    cycles:
        Cycles to report under the graph, if any.
    """
    by_name = {s.name: s for s in statements}
    tree = Tree("[bold]Dependency Graph[/bold]", guide_style="dim")

    for node in graph:
        record = by_name.get(node)
        label = _coloured_type(record.type.value) if record else "[dim]EXTERNAL[/dim]"
        branch = tree.add(f"{label}: [bold]{escape(node)}[/bold]")

        deps = graph.non_self_dependencies(node)
        if deps:
            branch.add(f"[blue]depends on:[/blue] {escape(', '.join(deps))}")
        else:
            branch.add("[dim]depends on: (none)[/dim]")

        if graph.is_self_referencing(node):
            branch.add(f"[yellow]self-referencing:[/yellow] {escape(node)} (hierarchical structure)")

        dependents = graph.non_self_dependents(node)
        if dependents:
            branch.add(f"[green]referenced by:[/green] {escape(', '.join(dependents))}")

    console.print(Panel(tree, border_style="blue"))

    if cycles:
        console.print("[bold red]Circular dependencies detected[/bold red]")
        for cycle in cycles:
            console.print(f"  [red]{escape(' -> '.join(cycle))}[/red]")
    else:
        console.print("[green]✔[/green] No circular dependencies detected")


# ---------------------------------------------------------------------------
# Execution order
# ---------------------------------------------------------------------------


def display_execution_order(console: Console, statements: list[StatementRecord]) -> None:
    """Render the resolved order as a numbered table."""
    if not statements:
        console.print("[dim]No statements to order.[/dim]")
        return

    table = Table(
        title="Recommended Execution Order",
        show_lines=False,
        pad_edge=True,
        expand=False,
    )
    table.add_column("#", style="dim", width=4, justify="right")
    table.add_column("File")
    table.add_column("Type")
    table.add_column("Name", style="bold")
    table.add_column("Depends On")

    for idx, statement in enumerate(statements, start=1):
        deps = statement.dependency_names
        table.add_row(
            str(idx),
            escape(statement.file_name),
            _coloured_type(statement.type.value),
            escape(statement.name),
            escape(", ".join(deps)) if deps else "-",
        )

    console.print(table)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def display_file_statements(console: Console, files: list[SqlFile]) -> None:
    """List each file with the statements it declares; warn on empty files."""
    for sql_file in files:
        if not sql_file.statements:
            console.print(f"[yellow]⚠[/yellow] {escape(sql_file.name)} - no statements found")
            continue
        described = ", ".join(f"{s.type.value}:{s.name}" for s in sql_file.statements)
        console.print(f"[green]✔[/green] {escape(sql_file.name)} - {escape(described)}")


def display_dangling_dependencies(console: Console, dangling: dict[str, list[str]]) -> None:
    """Warn about references to objects no input file declares."""
    for name, referrers in dangling.items():
        console.print(
            f"[yellow]⚠[/yellow] '{escape(name)}' is referenced by "
            f"{escape(', '.join(referrers))} but not defined in the input"
        )


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def display_error(console: Console, error: SqlsmithError) -> None:
    """Render a SQLsmith error from its structured fields."""
    from sqlsmith.errors import (
        CircularDependencyError,
        DuplicateNameError,
        InvalidStatementOrderError,
    )

    if isinstance(error, DuplicateNameError):
        table = Table(title="Duplicate Statement Names", expand=False)
        table.add_column("Name", style="bold")
        table.add_column("Files")
        for name, files in error.duplicates.items():
            table.add_row(escape(name), escape(", ".join(files)))
        console.print(table)
    elif isinstance(error, InvalidStatementOrderError):
        console.print(
            Panel(
                f"[bold]File:[/bold] {escape(error.file_path)}\n"
                f"[bold]Statement:[/bold] {escape(error.statement_name)} (position {error.statement_position})\n"
                f"[bold]Depends on:[/bold] {escape(error.dependency_name)} (position {error.dependency_position})\n\n"
                "[dim]Reorder the file, or pass --allow-reorder.[/dim]",
                title="Invalid Statement Order",
                border_style="red",
            )
        )
    elif isinstance(error, CircularDependencyError):
        tree = Tree("[bold red]Circular dependencies[/bold red]")
        for description in error.cycle_descriptions:
            tree.add(f"[red]{escape(description)}[/red]")
        console.print(tree)

    console.print(f"[red]{escape(error.detailed_message())}[/red]")
