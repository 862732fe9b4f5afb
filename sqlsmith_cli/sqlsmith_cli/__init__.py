"""Command-line interface for SQLsmith."""
