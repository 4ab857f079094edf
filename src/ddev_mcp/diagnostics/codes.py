"""Stable, searchable error code registry.

Ranges:
- Q02xx  Statement shape (stacking)
- Q03xx  Classification / access control
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DiagnosticCode:
    value: int

    def __str__(self) -> str:
        return f"Q{self.value:04d}"


# Statement shape (Q02xx)
MULTIPLE_STATEMENTS = DiagnosticCode(202)

# Classification / access control (Q03xx)
NOT_WHITELISTED = DiagnosticCode(301)
CATASTROPHIC_OPERATION = DiagnosticCode(302)
WRITE_MODE_ALLOWED = DiagnosticCode(303)
