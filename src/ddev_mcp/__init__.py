"""ddev-mcp: guarded tool access to DDEV projects for AI agents."""

__version__ = "0.8.0"
