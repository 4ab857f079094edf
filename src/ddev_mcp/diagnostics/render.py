"""Render diagnostics for terminal (text) and agent (JSON) output."""

from __future__ import annotations

from ddev_mcp.diagnostics.types import Diagnostic, DiagnosticResult


def render_json(result: DiagnosticResult) -> dict:
    """Render a DiagnosticResult as a JSON-serializable dict."""
    return {
        "original_sql": result.original_sql,
        "normalized_sql": result.normalized_sql,
        "statement_count": result.statement_count,
        "allowed": not result.blocked,
        "blocked": result.blocked,
        "classification": result.classification,
        "reason": result.reason,
        "rule": result.rule,
        "tables": result.tables,
        "diagnostics": [_diagnostic_to_dict(diag) for diag in result.diagnostics],
    }


def render_text(result: DiagnosticResult) -> str:
    """Render a DiagnosticResult as human-readable text."""
    lines: list[str] = []
    for d in result.diagnostics:
        lines.append(f"{d.level.name.lower()}[{d.code}]: {d.message}")
        for note in d.notes:
            lines.append(f"  = note: {note}")

    if not result.blocked:
        rule = f" (rule: {result.rule})" if result.rule else ""
        lines.append(f"allowed{rule}")
    if result.tables:
        lines.append(f"tables: {', '.join(result.tables)}")

    return "\n".join(lines)


def _diagnostic_to_dict(d: Diagnostic) -> dict:
    return {
        "level": d.level.name.lower(),
        "code": str(d.code),
        "message": d.message,
        "notes": d.notes,
    }
