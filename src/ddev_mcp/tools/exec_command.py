"""ddev_exec_command: run a shell command in the web container."""

from __future__ import annotations

from typing import Any

from ddev_mcp.config import ServerConfig
from ddev_mcp.ddev.command import run_ddev
from ddev_mcp.tools._base import PROJECT_NAME_PROPERTY, ToolSpec, optional_str, require_str


def _handle(arguments: dict[str, Any], config: ServerConfig) -> str:
    # ddev exec hands its argument to bash inside the container.
    output = run_ddev(
        ["exec", require_str(arguments, "command")],
        project=optional_str(arguments, "project_name"),
        timeout=config.command_timeout,
    )
    return f"Command executed successfully:\n\n{output}"


TOOL = ToolSpec(
    name="ddev_exec_command",
    description="Execute a command inside the DDEV web service",
    input_schema={
        "type": "object",
        "properties": {
            "command": {
                "type": "string",
                "description": "Command to execute in the web service",
            },
            "project_name": PROJECT_NAME_PROPERTY,
        },
        "required": ["command"],
    },
    handler=_handle,
)
