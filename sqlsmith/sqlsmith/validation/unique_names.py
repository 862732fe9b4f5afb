"""Global name uniqueness across source files."""

from __future__ import annotations

import logging

from sqlsmith.errors import DuplicateNameError
from sqlsmith.models.statement import StatementRecord

logger = logging.getLogger(__name__)


def find_duplicate_names(records: list[StatementRecord]) -> dict[str, list[str]]:
    """Return names declared by more than one distinct source file.

    Repeated declarations inside a single file are not reported; that is a
    parser-level concern.

    Returns
    -------
    dict[str, list[str]]
        Duplicated name mapped to the sorted list of files declaring it, in
        order of first duplicate sighting.
    """
    first_seen: dict[str, str] = {}
    duplicates: dict[str, set[str]] = {}

    for record in records:
        existing = first_seen.get(record.name)
        if existing is None:
            first_seen[record.name] = record.source_file
            continue
        if existing != record.source_file:
            duplicates.setdefault(record.name, {existing}).add(record.source_file)

    return {name: sorted(files) for name, files in duplicates.items()}


def validate_unique_names(records: list[StatementRecord]) -> None:
    """Raise if any object name is declared in more than one file.

    Raises
    ------
    DuplicateNameError
        Listing every duplicated name with its files.
    """
    duplicates = find_duplicate_names(records)
    if duplicates:
        logger.debug("Duplicate statement names: %s", duplicates)
        raise DuplicateNameError(duplicates)
