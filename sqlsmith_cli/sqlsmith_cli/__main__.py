"""Entry point for `python -m sqlsmith_cli` and the `sqlsmith` console script."""

from __future__ import annotations

from sqlsmith_cli.app import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()
