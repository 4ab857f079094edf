"""MCP tool server over stdio.

Exposes the tools in ``ddev_mcp.tools`` and two resources:

- ``ddev://current``: status of the current (or configured) project plus the
  effective server settings, as JSON.
- ``ddev://config``: ``.ddev/config.yaml`` of the working directory.

The decorated handlers are thin: every decision lives in a plain method on
DdevMcpServer so it can be exercised without a transport.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    ErrorData,
    Resource,
    TextContent,
    Tool,
)

from ddev_mcp import __version__
from ddev_mcp.config import ServerConfig
from ddev_mcp.ddev.projects import get_project_status
from ddev_mcp.tools import TOOLS, TOOLS_BY_NAME, ToolSpec

logger = logging.getLogger(__name__)

SERVER_NAME = "ddev-mcp"
CURRENT_URI = "ddev://current"
CONFIG_URI = "ddev://config"


def _error(code: int, message: str) -> McpError:
    return McpError(ErrorData(code=code, message=message))


class DdevMcpServer:
    def __init__(self, config: ServerConfig | None = None, *, cwd: Path | None = None) -> None:
        self.config = config or ServerConfig()
        self.cwd = cwd
        self.server: Server = Server(SERVER_NAME, version=__version__)
        self._register_handlers()

    # -- Tools -------------------------------------------------------------------

    def available_tools(self) -> list[ToolSpec]:
        tools = list(TOOLS)
        if self.config.single_project:
            tools = [t for t in tools if t.name != "ddev_list_projects"]
        if self.config.allowed_commands is not None:
            tools = [t for t in tools if t.name in self.config.allowed_commands]
        return tools

    def list_tools(self) -> list[Tool]:
        return [
            Tool(name=t.name, description=t.description, inputSchema=t.schema_for(self.config))
            for t in self.available_tools()
        ]

    def resolve_project_name(self, project_name: str | None) -> str | None:
        """Apply single-project mode: the configured project or nothing."""
        pinned = self.config.single_project
        if not pinned:
            return project_name
        if project_name and project_name != pinned:
            raise _error(
                INVALID_REQUEST,
                f"Access denied: Project '{project_name}' is not the configured single project",
            )
        return pinned

    def dispatch(self, name: str, arguments: dict[str, Any] | None) -> str:
        """Run a tool call.

        Raises McpError for requests the server refuses and ToolError when the
        tool itself fails.
        """
        tool = TOOLS_BY_NAME.get(name)
        if tool is None:
            raise _error(METHOD_NOT_FOUND, f"Unknown tool: {name}")
        allowed = self.config.allowed_commands
        if allowed is not None and name not in allowed:
            raise _error(
                METHOD_NOT_FOUND, f"Command '{name}' is not in the allowed commands whitelist"
            )

        args = dict(arguments or {})
        project = args.get("project_name")
        args["project_name"] = self.resolve_project_name(
            project if isinstance(project, str) and project else None
        )

        t0 = time.monotonic()
        try:
            return tool.run(args, self.config)
        finally:
            duration_ms = round((time.monotonic() - t0) * 1000, 1)
            logger.info("tool %s finished in %.1f ms", name, duration_ms)

    # -- Resources ---------------------------------------------------------------

    def list_resources(self) -> list[Resource]:
        return [
            Resource(
                uri=CURRENT_URI,  # type: ignore[arg-type]
                name="Current Project Info",
                description="Information about the current/default DDEV project context",
                mimeType="application/json",
            ),
            Resource(
                uri=CONFIG_URI,  # type: ignore[arg-type]
                name="DDEV Configuration",
                description="Current DDEV project configuration",
                mimeType="application/yaml",
            ),
        ]

    def read_resource(self, uri: str) -> ReadResourceContents:
        if uri == CURRENT_URI:
            return ReadResourceContents(content=self._current_project(), mime_type="application/json")
        if uri == CONFIG_URI:
            return ReadResourceContents(content=self._project_config(), mime_type="application/yaml")
        raise _error(INVALID_PARAMS, f"Unknown resource: {uri}")

    def _current_project(self) -> str:
        project = get_project_status(
            self.config.single_project, timeout=self.config.command_timeout
        )
        payload = {
            "project": project.to_dict() if project else None,
            "serverConfig": {
                "defaultProjectName": self.config.single_project,
                "allowWriteOperations": self.config.allow_write,
                "securityMode": self.config.security_mode,
                "allowedCommands": list(self.config.allowed_commands)
                if self.config.allowed_commands is not None
                else None,
            },
            "timestamp": datetime.now(UTC).isoformat(),
        }
        return json.dumps(payload, indent=2, default=str)

    def _project_config(self) -> str:
        path = (self.cwd or Path.cwd()) / ".ddev" / "config.yaml"
        if not path.exists():
            raise _error(INVALID_REQUEST, "No DDEV configuration found in current directory")
        try:
            return path.read_text()
        except OSError as e:
            raise _error(INTERNAL_ERROR, f"Failed to read config file: {e}") from e

    # -- Wiring ------------------------------------------------------------------

    def _register_handlers(self) -> None:
        server = self.server

        @server.list_tools()  # type: ignore[untyped-decorator,no-untyped-call]
        async def list_tools() -> list[Tool]:
            return self.list_tools()

        @server.call_tool()  # type: ignore[untyped-decorator]
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            # ddev calls block on subprocesses; keep the event loop free.
            text = await asyncio.to_thread(self.dispatch, name, arguments)
            return [TextContent(type="text", text=text)]

        @server.list_resources()  # type: ignore[untyped-decorator,no-untyped-call]
        async def list_resources() -> list[Resource]:
            return self.list_resources()

        @server.read_resource()  # type: ignore[untyped-decorator,no-untyped-call]
        async def read_resource(uri: Any) -> list[ReadResourceContents]:
            return [await asyncio.to_thread(self.read_resource, str(uri))]

    async def run(self) -> None:
        logger.info(
            "DDEV MCP server running on stdio (%s mode, project=%s)",
            self.config.security_mode,
            self.config.single_project or "any",
        )
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream, write_stream, self.server.create_initialization_options()
            )
