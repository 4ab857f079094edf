"""Internal types for the policy engine."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from ddev_mcp.diagnostics.codes import DiagnosticCode


class Verdict(enum.Enum):
    ALLOWED = "allowed"
    DENIED = "denied"
    CATASTROPHIC = "catastrophic"  # denied in every mode


@dataclass(frozen=True)
class Classification:
    """Outcome of validating one query.

    ``reason`` is None exactly when the query is allowed. ``rule`` names the
    rule that decided, when one did (empty input and write mode have none).
    """

    kind: Verdict
    reason: str | None = None
    rule: str | None = None
    code: DiagnosticCode | None = None

    @property
    def allowed(self) -> bool:
        return self.kind is Verdict.ALLOWED

    @classmethod
    def allow(cls, rule: str | None = None, code: DiagnosticCode | None = None) -> Classification:
        return cls(kind=Verdict.ALLOWED, rule=rule, code=code)
