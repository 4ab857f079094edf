"""Tool registry. Order is the order tools are advertised in."""

from ddev_mcp.tools import (
    composer_command,
    db_query,
    exec_command,
    list_projects,
    project_status,
)
from ddev_mcp.tools._base import ToolError, ToolSpec, handle_tool_error

TOOLS: tuple[ToolSpec, ...] = (
    composer_command.TOOL,
    db_query.TOOL,
    exec_command.TOOL,
    list_projects.TOOL,
    project_status.TOOL,
)

TOOLS_BY_NAME: dict[str, ToolSpec] = {tool.name: tool for tool in TOOLS}

__all__ = ["TOOLS", "TOOLS_BY_NAME", "ToolError", "ToolSpec", "handle_tool_error"]
