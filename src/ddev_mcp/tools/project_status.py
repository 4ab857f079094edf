"""ddev_project_status: describe one project."""

from __future__ import annotations

import json
from typing import Any

from ddev_mcp.config import ServerConfig
from ddev_mcp.ddev.projects import get_project_status
from ddev_mcp.tools._base import PROJECT_NAME_PROPERTY, ToolSpec, optional_str


def _handle(arguments: dict[str, Any], config: ServerConfig) -> str:
    name = optional_str(arguments, "project_name")
    project = get_project_status(name, timeout=config.command_timeout)
    if project is None:
        return f"DDEV project not found: {name or 'current'}"
    return f"DDEV Project Status:\n\n{json.dumps(project.to_dict(), indent=2, default=str)}"


TOOL = ToolSpec(
    name="ddev_project_status",
    description="Get the current status and configuration of a DDEV project",
    input_schema={
        "type": "object",
        "properties": {"project_name": PROJECT_NAME_PROPERTY},
    },
    handler=_handle,
)
