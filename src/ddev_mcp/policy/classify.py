"""Classify normalized queries as allowed, denied, or catastrophic."""

from __future__ import annotations

from ddev_mcp.diagnostics import codes
from ddev_mcp.policy._types import Classification, Verdict
from ddev_mcp.policy.normalize import NormalizedStatement
from ddev_mcp.policy.rules import CATASTROPHIC_RULES, READ_ONLY_RULES, Rule

STACKED_REASON = (
    "Query rejected: multiple statements detected. Stacked queries are never in "
    "the whitelist of permitted operations; submit one statement per call."
)
WHITELIST_REASON = (
    "Query not in whitelist of safe read-only operations. Only SELECT, SHOW, "
    "DESCRIBE, EXPLAIN, and database introspection commands are allowed. "
    "Use --allow-write to enable write operations."
)
CATASTROPHIC_REASON = (
    "This operation is permanently blocked as it could be catastrophic to the "
    "system or expose sensitive data ({category})."
)


def first_match(rules: tuple[Rule, ...], *texts: str) -> Rule | None:
    """Return the first rule matching any of ``texts``, in table order."""
    for rule in rules:
        if any(rule.matches(text) for text in texts):
            return rule
    return None


def classify(statement: NormalizedStatement, *, allow_write: bool) -> Classification:
    """Classify a normalized statement. First deciding stage wins.

    1. Stacked statements are denied in every mode. A ``;`` anywhere in the
       raw text counts, comments and string literals included.
    2. Catastrophic operations are denied in every mode. Rules run against
       both the comment-stripped text and the raw text, so neither a quoted
       ``--`` nor a version-conditional comment (``/*! ... */``) hides one.
    3. Write mode allows everything else; otherwise the statement must match
       the read-only whitelist. Empty input is allowed.
    """
    if statement.is_stacked:
        return Classification(
            kind=Verdict.DENIED,
            reason=STACKED_REASON,
            rule="multiple_statements",
            code=codes.MULTIPLE_STATEMENTS,
        )

    rule = first_match(CATASTROPHIC_RULES, statement.text, statement.raw)
    if rule is not None:
        return Classification(
            kind=Verdict.CATASTROPHIC,
            reason=CATASTROPHIC_REASON.format(category=rule.category),
            rule=rule.name,
            code=codes.CATASTROPHIC_OPERATION,
        )

    if statement.is_empty:
        return Classification.allow()

    rule = first_match(READ_ONLY_RULES, statement.text)
    if rule is not None:
        return Classification.allow(rule=rule.name)
    if allow_write:
        return Classification.allow(code=codes.WRITE_MODE_ALLOWED)

    return Classification(
        kind=Verdict.DENIED,
        reason=WHITELIST_REASON,
        rule="not_whitelisted",
        code=codes.NOT_WHITELISTED,
    )
