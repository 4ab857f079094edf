"""Diagnostic system: codes, types and rendering."""

from ddev_mcp.diagnostics import codes
from ddev_mcp.diagnostics.codes import DiagnosticCode
from ddev_mcp.diagnostics.types import Diagnostic, DiagnosticResult, Level

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticResult",
    "Level",
    "codes",
]
