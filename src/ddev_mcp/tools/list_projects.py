"""ddev_list_projects: every project known to ddev."""

from __future__ import annotations

from typing import Any

from mcp.shared.exceptions import McpError
from mcp.types import METHOD_NOT_FOUND, ErrorData

from ddev_mcp.config import ServerConfig
from ddev_mcp.ddev.projects import Project, list_projects
from ddev_mcp.tools._base import ToolSpec

SINGLE_PROJECT_MESSAGE = (
    "ddev_list_projects is not available in single project mode for security reasons"
)


def format_project(project: Project) -> str:
    location = project.shortroot if project.shortroot != "N/A" else project.approot
    return (
        f"• {project.name} ({project.status})\n"
        f"  Location: {location}\n"
        f"  Type: {project.type}\n"
        f"  URLs: {project.primary_url}\n"
    )


def _handle(arguments: dict[str, Any], config: ServerConfig) -> str:
    if config.single_project:
        raise McpError(ErrorData(code=METHOD_NOT_FOUND, message=SINGLE_PROJECT_MESSAGE))

    projects = list_projects(timeout=config.command_timeout)
    listing = "\n".join(format_project(p) for p in projects)
    return f"Found {len(projects)} DDEV projects:\n\n{listing}"


TOOL = ToolSpec(
    name="ddev_list_projects",
    description="List all DDEV projects with their status and information",
    input_schema={"type": "object", "properties": {}},
    handler=_handle,
)
