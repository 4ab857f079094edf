"""Query policy: normalize, classify, and describe the decision as diagnostics."""

from __future__ import annotations

from ddev_mcp.diagnostics import Diagnostic, DiagnosticResult, codes
from ddev_mcp.policy._types import Classification, Verdict
from ddev_mcp.policy.classify import classify, first_match
from ddev_mcp.policy.normalize import NormalizedStatement, normalize
from ddev_mcp.policy.rules import READ_ONLY_RULES
from ddev_mcp.policy.tables import extract_tables

__all__ = [
    "Classification",
    "NormalizedStatement",
    "Verdict",
    "is_read_only_query",
    "normalize",
    "run_policy",
    "validate_query_security",
]


def validate_query_security(query: object, allow_write: bool) -> Classification:
    """Validate a query before it reaches a database connection.

    Never raises. A non-allowed result carries a reason that names the policy
    that refused it ("whitelist" or "catastrophic").
    """
    return classify(normalize(query), allow_write=bool(allow_write))


def is_read_only_query(query: object) -> bool:
    """True if the query matches the read-only whitelist.

    Empty input is read-only; stacked statements never are.
    """
    statement = normalize(query)
    if statement.is_empty:
        return True
    if statement.is_stacked:
        return False
    return first_match(READ_ONLY_RULES, statement.text) is not None


def to_diagnostics(classification: Classification) -> list[Diagnostic]:
    """Describe a classification as diagnostics (empty for a plain allow)."""
    if classification.code is None:
        return []

    if classification.code == codes.MULTIPLE_STATEMENTS:
        diag = (
            Diagnostic.error(codes.MULTIPLE_STATEMENTS, classification.reason or "")
            .note("only single statements are allowed (possible SQL injection)")
            .note("split into separate ddev_db_query calls if intentional")
        )
    elif classification.code == codes.CATASTROPHIC_OPERATION:
        diag = Diagnostic.error(
            codes.CATASTROPHIC_OPERATION, classification.reason or ""
        ).note(f"matched rule: {classification.rule}")
    elif classification.code == codes.NOT_WHITELISTED:
        diag = Diagnostic.error(codes.NOT_WHITELISTED, classification.reason or "").note(
            "start the server with --allow-write to permit writes"
        )
    else:
        diag = Diagnostic.info(
            classification.code,
            "write mode: statement is outside the read-only whitelist",
        )
    return [diag]


def run_policy(
    sql: object,
    *,
    allow_write: bool = False,
    dialect: str | None = None,
) -> DiagnosticResult:
    """Run the full policy pipeline on a query.

    Steps:
        1. Normalize (strip comments, fold whitespace, split statements)
        2. Classify (stacked → catastrophic → whitelist / write mode)
        3. Describe the decision as diagnostics
        4. Extract referenced tables for display and auditing

    Args:
        sql: The raw query from the agent.
        allow_write: If True, non-whitelisted, non-catastrophic statements pass.
        dialect: sqlglot dialect used for table extraction only.
    """
    statement = normalize(sql)
    classification = classify(statement, allow_write=allow_write)
    tables = (
        extract_tables(statement.statements[0], dialect=dialect)
        if statement.statement_count == 1 and not statement.is_stacked
        else []
    )

    return DiagnosticResult(
        original_sql=statement.source,
        normalized_sql=statement.text,
        diagnostics=to_diagnostics(classification),
        blocked=not classification.allowed,
        statement_count=statement.statement_count,
        tables=tables,
        classification=classification.kind.value,
        reason=classification.reason,
        rule=classification.rule,
    )
