"""Render ordered statements as a single SQL script."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

from sqlsmith.errors import FileSystemError
from sqlsmith.models.statement import StatementRecord

logger = logging.getLogger(__name__)

_BANNER = "-- " + "=" * 64


class MergeOptions(BaseModel):
    """Layout options for :func:`render_merged_sql`."""

    add_comments: bool = Field(
        default=True,
        description="Precede each file block with a banner describing its statements.",
    )
    include_header: bool = Field(
        default=True,
        description="Start the output with a generation summary.",
    )
    separate_statements: bool = Field(
        default=True,
        description="Put a blank line between file blocks.",
    )


def _describe(statement: StatementRecord) -> str:
    names = statement.dependency_names
    deps = f" (depends on: {', '.join(names)})" if names else " (no dependencies)"
    return f"{statement.type.value.upper()}: {statement.name}{deps}"


def _terminated(content: str) -> str:
    content = content.strip()
    if content and not content.endswith(";"):
        # A trailing line comment would swallow a semicolon on the same line.
        content += "\n;" if "--" in content.rsplit("\n", 1)[-1] else ";"
    return content


def _file_blocks(statements: list[StatementRecord]) -> list[list[StatementRecord]]:
    """Group consecutive statements that come from the same file."""
    blocks: list[list[StatementRecord]] = []
    for statement in statements:
        if blocks and blocks[-1][0].source_file == statement.source_file:
            blocks[-1].append(statement)
        else:
            blocks.append([statement])
    return blocks


def render_header(statements: list[StatementRecord], generated_at: datetime | None = None) -> str:
    timestamp = (generated_at or datetime.now(UTC)).isoformat()
    file_count = len({s.source_file for s in statements})
    order = " → ".join(f"{s.type.value}:{s.name}" for s in statements)
    return "\n".join(
        [
            "-- SQLsmith Output",
            f"-- Generated: {timestamp}",
            f"-- Files processed: {file_count}",
            f"-- Statements merged: {len(statements)}",
            f"-- Order: {order}",
        ]
    )


def render_merged_sql(
    statements: list[StatementRecord],
    options: MergeOptions | None = None,
    *,
    generated_at: datetime | None = None,
) -> str:
    """Concatenate *statements* in the given order.

    The order is taken as-is; callers pass the output of the merge
    pipeline.  Consecutive statements from one file form a block, so a file
    whose statements are interleaved with other files' appears once per
    run.

    Parameters
    ----------
    statements:
        Ordered records to render.
    options:
        Layout options; defaults to :class:`MergeOptions` defaults.
    generated_at:
        Timestamp for the header; defaults to now (UTC).

    Returns
    -------
    str
        The merged script, or ``""`` when *statements* is empty.
    """
    if not statements:
        return ""
    opts = options or MergeOptions()

    sections: list[str] = []
    if opts.include_header:
        sections.append(render_header(statements, generated_at))

    for block in _file_blocks(statements):
        lines: list[str] = []
        if opts.add_comments:
            lines.extend(
                [
                    _BANNER,
                    f"-- File: {block[0].file_name}",
                    f"-- Statements: {', '.join(_describe(s) for s in block)}",
                    _BANNER,
                ]
            )
        lines.extend(_terminated(s.raw_content) for s in block if s.raw_content.strip())
        sections.append("\n".join(lines))

    separator = "\n\n" if opts.separate_statements else "\n"
    return separator.join(sections) + "\n"


def write_output(content: str, path: Path) -> None:
    """Write merged SQL to *path* (UTF-8).

    Raises
    ------
    FileSystemError
        If the parent directory does not exist or the write fails.
    """
    parent = path.parent
    if not parent.is_dir():
        raise FileSystemError.invalid_output_path(str(path), f"directory does not exist: {parent}")
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise FileSystemError.invalid_output_path(str(path), str(exc)) from exc
    logger.info("Output written to %s", path)
