"""Merged SQL rendering and output."""

from sqlsmith.output.formatter import MergeOptions, render_header, render_merged_sql, write_output

__all__ = [
    "MergeOptions",
    "render_header",
    "render_merged_sql",
    "write_output",
]
