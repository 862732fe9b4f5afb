"""Statement processors: parsed SQL to :class:`StatementRecord`.

One pure extraction function per supported :class:`StatementType`, selected
through :data:`_PROCESSORS`.  Each takes the parsed ``CREATE`` expression
and returns the created object's name and the names it references:

* **table** -- column-level ``REFERENCES`` and table-level
  ``FOREIGN KEY ... REFERENCES`` targets, plus tables read by
  ``CREATE TABLE ... AS SELECT``.
* **view** -- every table read by the defining query, CTE names excluded.
* **sequence** -- no dependencies.

Names are bare identifiers (schema/catalog qualifiers are dropped) so that
``public.users`` and ``users`` resolve to the same node.

Statements that do not define a supported object (``INSERT``,
``CREATE INDEX``, ``COMMENT ON`` ...) do not become records.  Their text is
attached to the preceding definition in the same file, or to the first
definition when none precedes them, so the merged output keeps them.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from sqlglot import exp

from sqlsmith.models.statement import Dependency, StatementRecord, StatementType
from sqlsmith.parser.ddl_parser import ParsedStatement

logger = logging.getLogger(__name__)

# ``CREATE SEQUENCE`` falls back to a Command expression in dialects whose
# grammar does not cover it.
_SEQUENCE_COMMAND_RE = re.compile(
    r"^\s*(?:(?:TEMP|TEMPORARY|UNLOGGED)\s+)?SEQUENCE\s+(?:IF\s+NOT\s+EXISTS\s+)?(?P<name>[\w.`\"\[\]]+)",
    re.IGNORECASE,
)


# ---------------------------------------------------------------------------
# Name helpers
# ---------------------------------------------------------------------------


def _table_name(node: exp.Expression | None) -> str | None:
    """Return the bare name of a Table, unwrapping a Schema if present."""
    if isinstance(node, exp.Schema):
        node = node.this
    if isinstance(node, exp.Table):
        return node.name or None
    return None


def _strip_quotes(identifier: str) -> str:
    name = identifier.split(".")[-1]
    return name.strip('`"[]')


def _query_tables(query: exp.Expression) -> list[str]:
    """Tables read by *query*, CTE names excluded, in first-seen order."""
    cte_names = {cte.alias_or_name for cte in query.find_all(exp.CTE)}
    names: list[str] = []
    for table in query.find_all(exp.Table):
        name = table.name
        if name and name not in cte_names:
            names.append(name)
    return list(dict.fromkeys(names))


def _dependencies(names: list[str], dep_type: StatementType = StatementType.TABLE) -> list[Dependency]:
    return [Dependency(name=name, type=dep_type) for name in dict.fromkeys(names)]


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def classify_statement(expression: exp.Expression) -> StatementType | None:
    """Return the kind of object *expression* creates, or None if unsupported."""
    if isinstance(expression, exp.Create):
        kind = (expression.args.get("kind") or "").upper()
        if kind == "TABLE":
            return StatementType.TABLE
        if kind == "VIEW":
            return StatementType.VIEW
        if kind == "SEQUENCE":
            return StatementType.SEQUENCE
        return None

    if isinstance(expression, exp.Command) and str(expression.this).upper() == "CREATE":
        if _SEQUENCE_COMMAND_RE.match(str(expression.expression or "")):
            return StatementType.SEQUENCE

    return None


# ---------------------------------------------------------------------------
# Per-type extraction
# ---------------------------------------------------------------------------


def _extract_table(expression: exp.Expression) -> tuple[str | None, list[Dependency]]:
    name = _table_name(expression.this)
    referenced: list[str] = []

    for reference in expression.find_all(exp.Reference):
        ref_name = _table_name(reference.this)
        if ref_name:
            referenced.append(ref_name)

    query = expression.expression
    if isinstance(query, exp.Query):
        referenced.extend(_query_tables(query))

    like = expression.find(exp.LikeProperty)
    if like is not None:
        like_name = _table_name(like.this)
        if like_name:
            referenced.append(like_name)

    return name, _dependencies(referenced)


def _extract_view(expression: exp.Expression) -> tuple[str | None, list[Dependency]]:
    name = _table_name(expression.this)
    query = expression.expression
    if query is None:
        return name, []
    return name, _dependencies(_query_tables(query))


def _extract_sequence(expression: exp.Expression) -> tuple[str | None, list[Dependency]]:
    if isinstance(expression, exp.Command):
        match = _SEQUENCE_COMMAND_RE.match(str(expression.expression or ""))
        return (_strip_quotes(match.group("name")) if match else None), []
    return _table_name(expression.this), []


_PROCESSORS: dict[StatementType, Callable[[exp.Expression], tuple[str | None, list[Dependency]]]] = {
    StatementType.TABLE: _extract_table,
    StatementType.VIEW: _extract_view,
    StatementType.SEQUENCE: _extract_sequence,
}


def supported_types() -> list[StatementType]:
    """Statement types the processors can extract."""
    return list(_PROCESSORS)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def extract_statement(parsed: ParsedStatement, source_file: str) -> StatementRecord | None:
    """Build a record for one parsed statement, or None if it defines nothing supported."""
    statement_type = classify_statement(parsed.expression)
    if statement_type is None:
        return None

    name, depends_on = _PROCESSORS[statement_type](parsed.expression)
    if not name:
        logger.warning(
            "Could not determine the %s name at %s:%d; statement skipped",
            statement_type.value,
            source_file,
            parsed.line_number,
        )
        return None

    return StatementRecord(
        type=statement_type,
        name=name,
        depends_on=depends_on,
        source_file=source_file,
        raw_content=parsed.text.strip(),
        line_number=parsed.line_number,
    )


def extract_statements(parsed: list[ParsedStatement], source_file: str) -> list[StatementRecord]:
    """Build records for every supported definition in one file.

    Unsupported statements are folded into the ``raw_content`` of the
    nearest definition (see module docstring).  A file without any
    supported definition yields an empty list.
    """
    records: list[StatementRecord] = []
    leading: list[str] = []

    for statement in parsed:
        record = extract_statement(statement, source_file)
        text = statement.text.strip()

        if record is not None:
            if leading:
                record = record.with_content(_join(leading + [record.raw_content]))
                leading = []
            records.append(record)
        elif records:
            records[-1] = records[-1].with_content(_join([records[-1].raw_content, text]))
        elif text:
            leading.append(text)

    if leading:
        logger.warning(
            "%s: %d statement(s) outside any supported definition were not merged",
            source_file,
            len(leading),
        )

    return records


def _join(parts: list[str]) -> str:
    """Join statement texts, restoring the semicolons removed by the splitter."""
    kept = [part for part in parts if part]
    closed = [part + ("\n;" if "--" in part.rsplit("\n", 1)[-1] else ";") for part in kept[:-1]]
    return "\n\n".join(closed + kept[-1:])
