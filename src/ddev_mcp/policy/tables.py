"""CTE-aware table extraction using sqlglot scope analysis.

Used for display and the audit log only; the security decision never depends
on whether a statement parses.
"""

from __future__ import annotations

import logging

import sqlglot
from sqlglot import exp
from sqlglot.optimizer.scope import traverse_scope

logger = logging.getLogger(__name__)


def extract_tables(sql: str, dialect: str | None = None) -> list[str]:
    """Extract referenced physical table names from a SQL string.

    Resolves CTEs, so only real tables are returned. Returns a sorted list of
    schema-qualified names (schema.table when a schema is present), or an
    empty list when the text does not parse (psql meta-commands, dialect
    extensions, garbage).
    """
    if not sql or not sql.strip():
        return []
    if sql.lstrip().startswith("\\"):
        # psql meta-command, not SQL
        return []
    try:
        statement = sqlglot.parse_one(sql, dialect=dialect)
    except sqlglot.errors.SqlglotError as e:
        logger.debug("table extraction skipped, unparseable SQL: %s", e)
        return []
    if statement is None:
        return []

    cte_names: set[str] = set()
    source_tables: set[str] = set()

    try:
        scopes = list(traverse_scope(statement))
    except Exception:
        # Scope analysis rejects DDL and some dialect statements.
        return _walk_tables(statement)

    if not scopes:
        return _walk_tables(statement)

    for scope in scopes:
        if scope.is_cte:
            cte_names.add(scope.expression.parent.alias)

    for scope in scopes:
        for table in scope.tables:
            if table.name not in cte_names:
                source_tables.add(_qualified_name(table))

    # DML targets (INSERT INTO, DELETE FROM, UPDATE) are not part of any scope.
    for node in (statement.find(t) for t in (exp.Insert, exp.Delete, exp.Update)):
        if node is not None:
            table = node.find(exp.Table)
            if table is not None and table.name not in cte_names:
                source_tables.add(_qualified_name(table))

    return sorted(source_tables)


def _walk_tables(statement: exp.Expression) -> list[str]:
    tables: set[str] = set()
    for node in statement.walk():
        if isinstance(node, exp.Table) and node.name:
            tables.add(_qualified_name(node))
    return sorted(tables)


def _qualified_name(table: exp.Table) -> str:
    if table.db:
        return f"{table.db}.{table.name}"
    return table.name
