"""Diagnostic values produced by the query policy.

Every classification is turned into zero or more Diagnostic values so the CLI,
the audit log and the tool server all describe a decision the same way.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from ddev_mcp.diagnostics.codes import DiagnosticCode


class Level(enum.IntEnum):
    INFO = 0
    WARNING = 1
    ERROR = 2


@dataclass
class Diagnostic:
    level: Level
    code: DiagnosticCode
    message: str
    notes: list[str] = field(default_factory=list)

    # -- Builder classmethods ---------------------------------------------------

    @classmethod
    def error(cls, code: DiagnosticCode, message: str) -> Diagnostic:
        return cls(level=Level.ERROR, code=code, message=message)

    @classmethod
    def warning(cls, code: DiagnosticCode, message: str) -> Diagnostic:
        return cls(level=Level.WARNING, code=code, message=message)

    @classmethod
    def info(cls, code: DiagnosticCode, message: str) -> Diagnostic:
        return cls(level=Level.INFO, code=code, message=message)

    # -- Builder chain methods --------------------------------------------------

    def note(self, note: str) -> Diagnostic:
        self.notes.append(note)
        return self

    # -- Query methods ----------------------------------------------------------

    @property
    def is_blocking(self) -> bool:
        return self.level == Level.ERROR


@dataclass
class DiagnosticResult:
    original_sql: str
    normalized_sql: str
    diagnostics: list[Diagnostic]
    blocked: bool
    statement_count: int = 0
    tables: list[str] = field(default_factory=list)
    classification: str | None = None
    reason: str | None = None
    rule: str | None = None

    @property
    def max_level(self) -> Level | None:
        if not self.diagnostics:
            return None
        return max(d.level for d in self.diagnostics)

    def codes(self) -> list[str]:
        return [str(d.code) for d in self.diagnostics]
