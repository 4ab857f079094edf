"""Thin wrappers around the ddev CLI."""

from ddev_mcp.ddev.command import DdevCommandError, run_ddev
from ddev_mcp.ddev.database import (
    DatabaseType,
    DbCommands,
    QueryNotAllowedError,
    db_query,
    get_database_type,
    get_db_commands,
)
from ddev_mcp.ddev.projects import Project, get_project_status, list_projects

__all__ = [
    "DatabaseType",
    "DbCommands",
    "DdevCommandError",
    "Project",
    "QueryNotAllowedError",
    "db_query",
    "get_database_type",
    "get_db_commands",
    "get_project_status",
    "list_projects",
    "run_ddev",
]
